"""Display labels (Chinese) for morphological features"""

from typing import Dict, Mapping

# feature -> (display key, value translations); dict order is the output order
MORPHOLOGY_LABELS = {
    'case': ('格', {
        'Nominative': '主格',
        'Genitive': '属格',
        'Dative': '与格',
        'Accusative': '宾格',
        'Instrumental': '工具格',
        'Prepositional': '前置格',
        'Dative/Prepositional': '与格/前置格',
        'Genitive/Dative/Prepositional': '属格/与格/前置格',
    }),
    'number': ('数', {
        'Singular': '单数',
        'Plural': '复数',
    }),
    'gender': ('性', {
        'Masculine': '阳性',
        'Feminine': '阴性',
        'Neuter': '中性',
    }),
    'person': ('人称', {
        '1st': '第一人称',
        '2nd': '第二人称',
        '3rd': '第三人称',
    }),
    'tense': ('时态', {
        'Present': '现在时',
        'Past': '过去时',
        'Future': '将来时',
    }),
    'aspect': ('体', {
        'Perfective': '完成体',
        'Imperfective': '未完成体',
    }),
}


def translate_morphology(morphology: Mapping[str, str]) -> Dict[str, str]:
    """
    Translate internal feature names and values to display labels.

    Unknown values are passed through unchanged; features missing from the input
    are missing from the output.

    Example:
        {'case': 'Nominative', 'number': 'Singular'} -> {'格': '主格', '数': '单数'}
    """
    translated = {}
    for feature, (label, values) in MORPHOLOGY_LABELS.items():
        value = morphology.get(feature)
        if value:
            translated[label] = values.get(value, value)
    return translated
