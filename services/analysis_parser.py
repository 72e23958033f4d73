"""
Analysis Text Parser
Recovers the constituent tree from the bullet-formatted grammar analysis returned by the LLM.

Expected shape (see services.llm_grammar_service.build_grammar_prompt):

    - **主语**: `Я` "我"
        - **中心词**: `Я` (【Я】) 主格, 单数 "我"
            - **定语**: `...` (【...】) ... "..."

The LLM is prompted but not constrained, so the parser is a small line-oriented state
machine that never raises: lines it does not recognize are dropped, components whose
header is malformed are skipped together with their children, and partial output is
returned as a partial (possibly empty) tree.

Morphology fragments cannot be reliably mapped to case/number/gender here, so they are
stored positionally as part_0, part_1, ...
"""

import logging
import re
from enum import Enum
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

COMPONENT_PATTERN = re.compile(r'^- \*\*(.*?)\*\*:\s*`(.*?)`(.*)$')
COMPONENT_START_PATTERN = re.compile(r'^- \*\*')
CHILD_PATTERN = re.compile(r'^ {4}- \*\*(.*?)\*\*:\s*`(.*?)`(.*)$')
NESTED_PATTERN = re.compile(r'^ {8}- \*\*(.*?)\*\*:\s*`(.*?)`(.*)$')
CITATION_PATTERN = re.compile(r'\(【(.*?)】\)')
MORPHOLOGY_PATTERN = re.compile(r'\(【.*?】\)\s+(.*?)(?="|$)')
QUOTED_PATTERN = re.compile(r'"(.*?)"')


class ParserState(Enum):
    AWAITING_COMPONENT = 'awaiting_component'
    IN_COMPONENT = 'in_component'
    IN_CHILD = 'in_child'


def extract_quoted(text: str) -> str:
    """Return the first double-quoted substring, or an empty string"""
    match = QUOTED_PATTERN.search(text)
    return match.group(1).strip() if match else ''


def extract_morphology(rest: str) -> Dict[str, str]:
    """Comma-separated fragments between the citation bracket and the next quote"""
    match = MORPHOLOGY_PATTERN.search(rest)
    if not match:
        return {}

    fragments = [part.strip() for part in match.group(1).strip().split(', ')]
    fragments = [part for part in fragments if part]
    return {f'part_{i}': part for i, part in enumerate(fragments)}


def parse_word_line(node_type: str, text: str, rest: str) -> Dict:
    """Build a child or nested node from the pieces of a matched bullet line"""
    text = text.strip()
    citation = CITATION_PATTERN.search(rest)
    return {
        'type': node_type.strip(),
        'text': text,
        'original': citation.group(1).strip() if citation else text,
        'translation': extract_quoted(rest),
        'morphology': extract_morphology(rest),
    }


class AnalysisTextParser:
    """
    Line-oriented parser with three states:

    AWAITING_COMPONENT -- no usable component yet (start, or after a malformed header)
    IN_COMPONENT       -- inside a component, no child under construction
    IN_CHILD           -- inside a component with a current child collecting nested nodes
    """

    def __init__(self):
        self.state = ParserState.AWAITING_COMPONENT
        self.components: List[Dict] = []
        self._component: Optional[Dict] = None
        self._child: Optional[Dict] = None

    def feed(self, line: str) -> None:
        line = line.rstrip('\r')

        if COMPONENT_START_PATTERN.match(line):
            self._close_component()
            self._open_component(line)
            return

        if self.state == ParserState.AWAITING_COMPONENT:
            return

        child_match = CHILD_PATTERN.match(line)
        if child_match:
            self._flush_child()
            self._child = parse_word_line(*child_match.groups())
            self._child['children'] = []
            self.state = ParserState.IN_CHILD
            return

        nested_match = NESTED_PATTERN.match(line)
        if nested_match and self.state == ParserState.IN_CHILD:
            self._child['children'].append(parse_word_line(*nested_match.groups()))

    def close(self) -> Dict:
        self._close_component()
        return {'mainComponents': self.components}

    def _open_component(self, line: str) -> None:
        match = COMPONENT_PATTERN.match(line)
        if not match:
            logger.debug(f"Skipping malformed component line: {line!r}")
            self.state = ParserState.AWAITING_COMPONENT
            return

        component_type, text, rest = match.groups()
        text = text.strip()
        self._component = {
            'type': component_type.strip(),
            'text': text,
            'original': text,
            'translation': extract_quoted(rest),
            'morphology': {},
            'children': [],
        }
        self.state = ParserState.IN_COMPONENT

    def _flush_child(self) -> None:
        if self._child is not None:
            self._component['children'].append(self._child)
            self._child = None

    def _close_component(self) -> None:
        if self._component is not None:
            self._flush_child()
            self.components.append(self._component)
        self._component = None
        self._child = None
        self.state = ParserState.AWAITING_COMPONENT


def parse_analysis_text(analysis_text: str) -> Dict:
    """
    Parse the LLM's grammar analysis into {"mainComponents": [...]}.

    Args:
        analysis_text: Raw text returned by the grammar analysis prompt

    Returns:
        Analysis dict; mainComponents is empty when nothing could be recovered
    """
    parser = AnalysisTextParser()
    if not isinstance(analysis_text, str):
        return parser.close()

    for line in analysis_text.split('\n'):
        parser.feed(line)

    result = parser.close()
    logger.debug(f"Parsed {len(result['mainComponents'])} components from analysis text")
    return result
