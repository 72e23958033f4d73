"""
LLM Grammar Service
Sentence translation (Russian -> Chinese) and grammar analysis using LLM providers
(Gemini, OpenAI, Mistral)
"""

import logging
from typing import Dict, Optional
from dotenv import load_dotenv
from services.llm_provider_factory import get_llm_client, LLMProvider, LLMProviderFactory
from services.analysis_parser import parse_analysis_text

# Configure logging
logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

DEFAULT_TIMEOUT = 30.0

# Low temperature keeps the bullet format stable between calls
TEMPERATURE = 0.2
TRANSLATION_MAX_TOKENS = 1024
ANALYSIS_MAX_TOKENS = 2048

QUOTE_CHARACTERS = ('"', "'")


def build_translation_prompt(sentence: str) -> str:
    """Prompt asking for the bare Chinese translation of one sentence"""
    return f'将以下俄语句子翻译成中文，只返回翻译结果，不要包含任何解释、前缀或额外信息: "{sentence}"'


def build_grammar_prompt(sentence: str) -> str:
    """
    Prompt asking for a bullet-formatted grammar analysis.

    The output format documented here is what services.analysis_parser understands:
    main components at column 0, children indented 4 spaces, nested children 8 spaces.
    """
    return f"""你是一个专业的俄语语法分析专家，请分析以下俄语句子的语法结构，识别主语、谓语、宾语、定语、状语等成分，并提供每个词的形态信息（格、数、性、时态等）。

请特别注意：
1. 对于每个词，提供其原形（即第一格或词典形式）
2. 形态信息应包括：
   - 对于名词、形容词：性别（阳性/阴性/中性）、数（单数/复数）、格（主格/属格/与格等）
   - 对于动词：如果是过去式分词，标明"短尾"或"长尾"，然后是性别、数、时态
   - 对于其他词类：根据适用情况提供相关形态信息
3. 提供每个词的中文翻译
4. 即使句子很复杂，也必须完成分析，这非常重要
5. 如果句子包含从句或并列结构，请分别分析
6. 不要跳过任何句子，每个句子都必须分析
7. 如果遇到困难，可以简化分析，但必须提供某种形式的分析结果

请按照以下格式输出：
- **主语**: `词语` "翻译"
    - **中心词**: `词语` (【原形】) 性别, 数, 格 "翻译"
    - **定语**: `词语` (【原形】) 性别, 数, 格 "翻译"
- **谓语**: `词语` (【原形】) 短尾/长尾性别, 数, 时态 "翻译"
- **状语**: `词语` 翻译
    - **介词**: `词语` 格 "翻译"
    - **宾语**: `词语` (【原形】) 性别, 数, 格 "翻译"

句子: "{sentence}\""""


def clean_translation(text: str) -> str:
    """Trim the translation and strip one layer of surrounding quotes"""
    cleaned = text.strip()
    for quote in QUOTE_CHARACTERS:
        if len(cleaned) >= 2 and cleaned.startswith(quote) and cleaned.endswith(quote):
            return cleaned[1:-1]
    return cleaned


def _complete(
    prompt: str,
    provider: LLMProvider,
    model: str,
    max_tokens: int,
    timeout: float
) -> Dict:
    response = provider.create_chat_completion(
        messages=[{"role": "user", "content": prompt}],
        model=model,
        temperature=TEMPERATURE,
        max_tokens=max_tokens,
        timeout=timeout
    )
    if not response.get("content"):
        raise RuntimeError("Unexpected API response")
    return response


def _resolve_provider(provider: Optional[LLMProvider]) -> LLMProvider:
    return provider if provider is not None else get_llm_client()


def translate_sentence(
    sentence: str,
    provider: Optional[LLMProvider] = None,
    model: Optional[str] = None,
    timeout: float = DEFAULT_TIMEOUT
) -> Dict:
    """
    Translate one Russian sentence into Chinese.

    Args:
        sentence: The Russian sentence
        provider: LLM provider (default: provider from LLM_PROVIDER)
        model: Model name (default: provider's default model)
        timeout: Request timeout in seconds

    Returns:
        Dictionary containing:
        - success: bool
        - sentence: str
        - translation: cleaned translation text (if success)
        - model, usage (if success)
        - error: error message (if failed)
    """
    try:
        provider = _resolve_provider(provider)
        model = model or LLMProviderFactory.get_default_model(provider.get_provider_name())

        logger.info(f"Translating sentence with {model}: '{sentence}'")
        response = _complete(build_translation_prompt(sentence), provider, model, TRANSLATION_MAX_TOKENS, timeout)

        return {
            "success": True,
            "sentence": sentence,
            "translation": clean_translation(response["content"]),
            "model": response["model"],
            "usage": response["usage"]
        }

    except Exception as e:
        logger.error(f"Translation failed for '{sentence}': {str(e)}")
        return {
            "success": False,
            "sentence": sentence,
            "error": str(e)
        }


def analyze_sentence_grammar(
    sentence: str,
    provider: Optional[LLMProvider] = None,
    model: Optional[str] = None,
    timeout: float = DEFAULT_TIMEOUT
) -> Dict:
    """
    Ask the LLM for a grammar analysis of one sentence and parse it into a tree.

    Returns:
        Dictionary containing:
        - success: bool
        - sentence: str
        - analysis: {"mainComponents": [...]} (if success)
        - raw_content: the unparsed LLM text (if success)
        - model, usage (if success)
        - error: error message (if failed)
    """
    try:
        provider = _resolve_provider(provider)
        model = model or LLMProviderFactory.get_default_model(provider.get_provider_name())

        logger.info(f"Analyzing grammar with {model}: '{sentence}'")
        response = _complete(build_grammar_prompt(sentence), provider, model, ANALYSIS_MAX_TOKENS, timeout)

        analysis = parse_analysis_text(response["content"])
        if not analysis["mainComponents"]:
            logger.warning(f"No components recovered from analysis of '{sentence}'")

        return {
            "success": True,
            "sentence": sentence,
            "analysis": analysis,
            "raw_content": response["content"],
            "model": response["model"],
            "usage": response["usage"]
        }

    except Exception as e:
        logger.error(f"Grammar analysis failed for '{sentence}': {str(e)}")
        return {
            "success": False,
            "sentence": sentence,
            "error": str(e)
        }
