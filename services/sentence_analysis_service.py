"""
Sentence Analysis Service - splits input text into sentences and analyzes each one

Workflow for the 'llm' engine:
1. Validate input (must contain Russian letters)
2. Split into sentences
3. Serve cached sentences from sentence_analysis_cache
4. Translate + analyze the remaining sentences in a worker pool (LLM calls only;
   the database is touched from the calling thread)
5. Cache successful results, return records in input order

Failures are contained per sentence: a failed translation becomes '翻译失败', a failed
analysis becomes a degraded tree, and nothing aborts the rest of the batch.
The 'rules' engine uses the offline rule-based analyzer and makes no external calls.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional

from models import db
from models.analysis_history import AnalysisHistory
from models.sentence_analysis_cache import SentenceAnalysisCache
from services.constituent_tree import analyze_grammar, build_error_analysis, build_failed_analysis
from services.llm_grammar_service import DEFAULT_TIMEOUT, analyze_sentence_grammar, translate_sentence
from services.llm_provider_factory import LLMProvider, LLMProviderFactory, get_llm_client
from services.sentence_segmenter import contains_russian, split_into_sentences

logger = logging.getLogger(__name__)

TRANSLATION_FAILED = '翻译失败'

ENGINE_LLM = 'llm'
ENGINE_RULES = 'rules'
ENGINES = (ENGINE_LLM, ENGINE_RULES)

DEFAULT_MAX_WORKERS = 4


class InvalidInputError(ValueError):
    """Input rejected before any sentence is processed"""


@dataclass
class SentenceOutcome:
    """Processed sentence plus what is needed to decide whether to cache it"""
    record: Dict
    cacheable: bool = False
    model_name: Optional[str] = None
    total_tokens: int = 0


def validate_input(text) -> str:
    """
    Check the analyze precondition.

    Raises:
        InvalidInputError: text is missing or contains no Russian letters
    """
    if not text or not isinstance(text, str):
        raise InvalidInputError('Text is required')
    if not contains_russian(text):
        raise InvalidInputError('Only Russian text can be analyzed')
    return text


def process_sentence(
    sentence: str,
    provider: Optional[LLMProvider] = None,
    model: Optional[str] = None,
    timeout: float = DEFAULT_TIMEOUT
) -> SentenceOutcome:
    """
    Translate and analyze one sentence with the LLM, degrading on failure.

    Never raises; the returned record always has original, translation and analysis.
    """
    try:
        translation_result = translate_sentence(sentence, provider=provider, model=model, timeout=timeout)
        analysis_result = analyze_sentence_grammar(sentence, provider=provider, model=model, timeout=timeout)

        if not translation_result['success'] and not analysis_result['success']:
            logger.warning(f"Translation and analysis both failed for '{sentence}'")
            return SentenceOutcome(record={
                'original': sentence,
                'translation': TRANSLATION_FAILED,
                'analysis': build_error_analysis(),
            })

        if translation_result['success']:
            translation = translation_result['translation']
        else:
            translation = TRANSLATION_FAILED

        if analysis_result['success']:
            analysis = analysis_result['analysis']
        else:
            logger.warning(f"Using degraded analysis for '{sentence}'")
            analysis = build_failed_analysis(sentence)

        # An answer that parsed to no components is shown but retried next time
        cacheable = (
            translation_result['success']
            and analysis_result['success']
            and bool(analysis['mainComponents'])
        )
        total_tokens = sum(
            result.get('usage', {}).get('total_tokens', 0)
            for result in (translation_result, analysis_result)
        )

        return SentenceOutcome(
            record={'original': sentence, 'translation': translation, 'analysis': analysis},
            cacheable=cacheable,
            model_name=analysis_result.get('model') or translation_result.get('model'),
            total_tokens=total_tokens
        )

    except Exception as e:
        logger.error(f"Error processing sentence '{sentence}': {str(e)}", exc_info=True)
        return SentenceOutcome(record={
            'original': sentence,
            'translation': TRANSLATION_FAILED,
            'analysis': build_error_analysis(),
        })


def analyze_sentence_with_rules(sentence: str) -> Dict:
    """Rule-based record for one sentence; translation is left empty"""
    return {
        'original': sentence,
        'translation': '',
        'analysis': analyze_grammar(sentence),
    }


def resolve_model_name(provider_name: Optional[str] = None, model: Optional[str] = None) -> str:
    """Model a request will use; part of the sentence cache key"""
    return model or LLMProviderFactory.get_default_model(provider_name)


def get_cached_analysis(
    sentence: str,
    model_name: Optional[str] = None,
    engine: str = ENGINE_LLM
) -> Optional[SentenceAnalysisCache]:
    """
    Look up a cached sentence result.

    Args:
        sentence: Sentence text as segmented
        model_name: Model the result must come from (default: configured provider's default)
        engine: Analysis engine

    Returns:
        SentenceAnalysisCache row or None if not cached (or the lookup failed)
    """
    model_name = model_name or resolve_model_name()
    try:
        cached = SentenceAnalysisCache.query.filter_by(
            sentence=sentence,
            engine=engine,
            model_name=model_name
        ).first()
        if cached:
            logger.info(f"Cache HIT: '{sentence}' ({engine}, {model_name})")
        else:
            logger.info(f"Cache MISS: '{sentence}' ({engine}, {model_name})")
        return cached

    except Exception as e:
        logger.error(f"Failed to read sentence cache: {str(e)}", exc_info=True)
        return None


def cache_analysis(
    outcome: SentenceOutcome,
    model_name: str,
    engine: str = ENGINE_LLM
) -> Optional[SentenceAnalysisCache]:
    """Store a successful sentence result; an existing entry for the same model is overwritten"""
    record = outcome.record
    try:
        entry = SentenceAnalysisCache.query.filter_by(
            sentence=record['original'],
            engine=engine,
            model_name=model_name
        ).first()
        if entry is None:
            entry = SentenceAnalysisCache(sentence=record['original'], engine=engine, model_name=model_name)
            db.session.add(entry)
        else:
            entry.updated_at = datetime.now(timezone.utc)

        entry.translation = record['translation']
        entry.analysis_json = record['analysis']
        entry.total_tokens = outcome.total_tokens
        db.session.flush()

        logger.info(f"Cached analysis: '{record['original']}' model={model_name} (answered by {outcome.model_name})")
        return entry

    except Exception as e:
        logger.error(f"Failed to cache sentence analysis: {str(e)}", exc_info=True)
        db.session.rollback()
        return None


def _create_provider(provider_name: Optional[str]) -> Optional[LLMProvider]:
    try:
        return get_llm_client(provider_name)
    except Exception as e:
        # Sentences still get degraded records; each call reports the same error
        logger.error(f"Failed to initialize LLM provider: {str(e)}")
        return None


def analyze_text(
    text: str,
    engine: str = ENGINE_LLM,
    use_cache: bool = True,
    provider_name: Optional[str] = None,
    model: Optional[str] = None,
    timeout: float = DEFAULT_TIMEOUT,
    max_workers: int = DEFAULT_MAX_WORKERS
) -> List[Dict]:
    """
    Analyze every sentence of a Russian text.

    Args:
        text: Raw input text
        engine: 'llm' (translation + LLM grammar analysis) or 'rules' (offline analyzer)
        use_cache: Read/write sentence_analysis_cache (llm engine only; needs app context)
        provider_name: LLM provider override (default: LLM_PROVIDER)
        model: Model override (default: provider's default model)
        timeout: Per-request timeout in seconds
        max_workers: Size of the per-sentence worker pool

    Returns:
        List of {original, translation, analysis} records in sentence order

    Raises:
        InvalidInputError: text missing or not Russian
        ValueError: unknown engine
    """
    validate_input(text)
    if engine not in ENGINES:
        raise ValueError(f"Unsupported engine: {engine}. Supported engines: {', '.join(ENGINES)}")

    sentences = split_into_sentences(text)
    logger.info(f"Split text into {len(sentences)} sentences (engine={engine})")

    if engine == ENGINE_RULES:
        return [analyze_sentence_with_rules(sentence) for sentence in sentences]

    model_name = resolve_model_name(provider_name, model)
    records: List[Optional[Dict]] = [None] * len(sentences)
    pending = []
    for index, sentence in enumerate(sentences):
        cached = get_cached_analysis(sentence, model_name) if use_cache else None
        if cached is not None:
            cached.hit_count = (cached.hit_count or 0) + 1
            records[index] = cached.to_record()
        else:
            pending.append(index)

    if pending:
        provider = _create_provider(provider_name)
        workers = max(1, min(max_workers, len(pending)))

        with ThreadPoolExecutor(max_workers=workers) as executor:
            outcomes = list(executor.map(
                lambda i: process_sentence(sentences[i], provider=provider, model=model_name, timeout=timeout),
                pending
            ))

        for index, outcome in zip(pending, outcomes):
            records[index] = outcome.record
            if use_cache and outcome.cacheable:
                cache_analysis(outcome, model_name)

    if use_cache:
        db.session.commit()

    return records


def save_history(text: str, results: List[Dict], engine: str = ENGINE_LLM) -> Optional[AnalysisHistory]:
    """Persist an analyzed text and its results"""
    try:
        entry = AnalysisHistory(
            text=text,
            engine=engine,
            sentence_count=len(results),
            results_json=results
        )
        db.session.add(entry)
        db.session.commit()

        logger.info(f"Saved analysis history {entry.id} ({len(results)} sentences)")
        return entry

    except Exception as e:
        logger.error(f"Failed to save analysis history: {str(e)}", exc_info=True)
        db.session.rollback()
        return None
