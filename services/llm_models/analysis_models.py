"""
Analysis Pydantic Models

Data contracts for sentence analysis results.
The tree is at most three levels deep: component -> child -> nested child.
"""

from pydantic import BaseModel, Field, model_validator
from typing import Dict, List


class NestedConstituent(BaseModel):
    """Deepest tree level; carries no children"""
    type: str = Field(description="Constituent role label, e.g. 主语, 中心词, 介词")
    text: str = Field(description="Surface form as found in the sentence")
    original: str = Field(default="", description="Citation (dictionary) form; defaults to text")
    translation: str = Field(default="", description="Short label or lexical gloss")
    morphology: Dict[str, str] = Field(default_factory=dict, description="Display-ready morphology")

    @model_validator(mode="before")
    @classmethod
    def default_original_to_text(cls, data):
        if isinstance(data, dict) and data.get("original") is None:
            data = {**data, "original": data.get("text", "")}
        return data


class ChildConstituent(NestedConstituent):
    """Second tree level (head word, attribute, preposition, ...)"""
    children: List[NestedConstituent] = Field(default_factory=list)


class Constituent(NestedConstituent):
    """Main sentence component (subject, predicate, object, adverbial)"""
    children: List[ChildConstituent] = Field(default_factory=list)


class AnalysisResult(BaseModel):
    """
    Grammar analysis of one sentence. An empty mainComponents list means
    "analysis unavailable".

    Example:
    {
        "mainComponents": [
            {
                "type": "主语", "text": "Я", "original": "Я", "translation": "我", "morphology": {},
                "children": [
                    {"type": "中心词", "text": "Я", "original": "Я", "translation": "我",
                     "morphology": {"part_0": "主格", "part_1": "单数"}, "children": []}
                ]
            }
        ]
    }
    """
    mainComponents: List[Constituent] = Field(default_factory=list)


class SentenceRecord(BaseModel):
    """Result for one sentence of the input text"""
    original: str = Field(description="The sentence as segmented from the input")
    translation: str = Field(default="", description="Chinese translation or failure marker")
    analysis: AnalysisResult = Field(default_factory=AnalysisResult)
