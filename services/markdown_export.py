"""
Markdown Export Service
Renders sentence records as Markdown using the same bullet layout the LLM is asked to
produce, so an exported analysis can be read back with services.analysis_parser.
"""

import re
from typing import Dict, List

NO_ANALYSIS_MESSAGE = '无法分析此句子的语法结构。请尝试简化句子或重新分析。'

OPTION_PATTERN = re.compile(r'\*\*Option 1.*?:\*\*(.*?)(?:\*\*Option|\*\*Why|$)', re.DOTALL)
LEAD_IN_PATTERN = re.compile(r"Here's the translation.*?:(.*?)(?:\n\n|\*\*|$)", re.DOTALL)
LABEL_PATTERN = re.compile(r'翻译：(.*?)(?:\n|$)')
CHINESE_PATTERN = re.compile(r'([\u4e00-\u9fa5，。！？；：“”‘’（）【】、…—《》]+)')


def extract_translation(translation: str) -> str:
    """
    Return plain translation text.

    Models sometimes wrap the answer: several "**Option N:**" variants (first option
    wins), a "Here's the translation:" lead-in or a "翻译：" label. Otherwise the first
    run of Chinese text is used, and text without any Chinese is returned as is.
    """
    if not translation:
        return ''

    if '**Option' in translation:
        match = OPTION_PATTERN.search(translation)
        if match:
            chinese = CHINESE_PATTERN.search(match.group(1))
            if chinese:
                return chinese.group(1)
            return match.group(1).strip()

    if "Here's the translation" in translation:
        match = LEAD_IN_PATTERN.search(translation)
        if match and match.group(1).strip():
            return match.group(1).strip()

    if '翻译：' in translation:
        match = LABEL_PATTERN.search(translation)
        if match and match.group(1).strip():
            return match.group(1).strip()

    chinese = CHINESE_PATTERN.search(translation)
    if chinese:
        return chinese.group(1)

    return translation.strip()


def _word_line(indent: str, node: Dict) -> str:
    line = f"{indent}- **{node.get('type', '')}**: `{node.get('text', '')}`"

    morphology = node.get('morphology') or {}
    if morphology:
        line += f" (【{node.get('original') or node.get('text', '')}】)"

        details = ', '.join(str(value) for value in morphology.values())
        if details:
            line += f" {details}"

        if node.get('translation'):
            line += f" \"{node['translation']}\""

    return line + '\n'


def render_analysis_markdown(analysis: Dict) -> str:
    """Bullet list for one analysis tree"""
    components = (analysis or {}).get('mainComponents')
    if components is None:
        return NO_ANALYSIS_MESSAGE + '\n'

    markdown = ''
    for component in components:
        markdown += f"- **{component.get('type', '')}**: `{component.get('text', '')}` \"{component.get('translation', '')}\"\n"

        for child in component.get('children') or []:
            markdown += _word_line('    ', child)

            for nested in child.get('children') or []:
                markdown += _word_line('        ', nested)

    return markdown


def render_sentence_markdown(record: Dict) -> str:
    """Markdown for a single sentence record (original, translation, analysis)"""
    if not record:
        return ''

    markdown = f"## 原句\n\n{record.get('original', '')}\n\n"
    markdown += f"## 翻译\n\n{extract_translation(record.get('translation', ''))}\n\n"
    markdown += "## 语法分析\n\n"
    markdown += render_analysis_markdown(record.get('analysis'))
    return markdown


def render_results_markdown(records: List[Dict]) -> str:
    """Markdown document for all sentences of an analysis"""
    if not records:
        return ''

    markdown = '# 俄语句子语法分析\n\n'
    for index, record in enumerate(records, start=1):
        markdown += f'# 句子 {index}\n\n'
        markdown += render_sentence_markdown(record)
        markdown += '\n---\n\n'

    return markdown


def export_filename(sentence_index=None) -> str:
    """Download filename; sentence_index is zero-based"""
    if sentence_index is None:
        return '俄语分析_全部句子.md'
    return f'俄语分析_句子{sentence_index + 1}.md'
