"""
Word-level grammatical data attached to cards.

One variant per part of speech; German grammar is the primary target
(articles, separable verbs, Perfekt auxiliaries).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Union

GERMAN_ARTICLES = ("der", "die", "das")


class WordType(str, Enum):
    """Word type classification."""

    VERB = "verb"
    NOUN = "noun"
    ADJECTIVE = "adjective"
    ADVERB = "adverb"
    PHRASE = "phrase"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str | None) -> WordType:
        try:
            return cls((value or "").lower())
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class VerbData:
    """Verb data including conjugation forms."""

    is_regular: bool = True
    is_separable: bool = False
    separable_prefix: str | None = None  # "auf" for aufmachen
    auxiliary: str = "haben"  # Perfekt auxiliary: haben or sein
    present_second_person: str | None = None  # du form, e.g. "sprichst"
    present_third_person: str | None = None  # er/sie/es form, e.g. "spricht"
    past_simple: str | None = None  # Präteritum, e.g. "sprach"
    past_participle: str | None = None  # Partizip II, e.g. "gesprochen"

    word_type = WordType.VERB

    def inflected_forms(self) -> dict[str, str]:
        forms = {
            "du (present)": self.present_second_person,
            "er/sie/es (present)": self.present_third_person,
            "past simple": self.past_simple,
            "past participle": self.past_participle,
        }
        return {label: form for label, form in forms.items() if form}


@dataclass(frozen=True)
class NounData:
    """Noun data including gender and declension."""

    gender: str = "das"  # der/die/das, or masculine/feminine/neuter
    plural: str | None = None
    genitive: str | None = None

    word_type = WordType.NOUN

    @property
    def article(self) -> str | None:
        """German article implied by the gender, if any."""
        gender = self.gender.lower()
        if gender in GERMAN_ARTICLES:
            return gender
        return {"masculine": "der", "feminine": "die", "neuter": "das"}.get(gender)

    def inflected_forms(self) -> dict[str, str]:
        forms = {"plural": self.plural, "genitive": self.genitive}
        return {label: form for label, form in forms.items() if form}


@dataclass(frozen=True)
class AdjectiveData:
    """Adjective data including comparison forms."""

    comparative: str | None = None  # "größer" for "groß"
    superlative: str | None = None  # "größten" for "groß"

    word_type = WordType.ADJECTIVE

    def inflected_forms(self) -> dict[str, str]:
        forms = {"comparative": self.comparative, "superlative": self.superlative}
        return {label: form for label, form in forms.items() if form}


@dataclass(frozen=True)
class AdverbData:
    usage_note: str | None = None

    word_type = WordType.ADVERB

    def inflected_forms(self) -> dict[str, str]:
        return {}


WordData = Union[VerbData, NounData, AdjectiveData, AdverbData]

_VARIANTS: dict[WordType, type] = {
    WordType.VERB: VerbData,
    WordType.NOUN: NounData,
    WordType.ADJECTIVE: AdjectiveData,
    WordType.ADVERB: AdverbData,
}

# camelCase keys used by AI replies and stored JSON
_CAMEL_KEYS = {
    "isRegular": "is_regular",
    "isSeparable": "is_separable",
    "separablePrefix": "separable_prefix",
    "presentSecondPerson": "present_second_person",
    "presentThirdPerson": "present_third_person",
    "pastSimple": "past_simple",
    "pastParticiple": "past_participle",
    "usageNote": "usage_note",
}


def word_data_to_dict(data: WordData) -> dict[str, Any]:
    """Serialize word data with a `type` discriminator."""
    return {"type": data.word_type.value, **asdict(data)}


def word_data_from_dict(
    data: dict[str, Any] | None,
    word_type: WordType | None = None,
) -> WordData | None:
    """
    Build word data from a dict.

    Args:
        data: Grammar fields (snake_case or camelCase keys)
        word_type: Variant to build; read from data["type"] when omitted

    Returns:
        The matching variant, or None for phrases/other/unknown types
    """
    if not data:
        return None
    if word_type is None:
        word_type = WordType.parse(data.get("type"))
    variant = _VARIANTS.get(word_type)
    if variant is None:
        return None

    fields = {f for f in variant.__dataclass_fields__}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        name = _CAMEL_KEYS.get(key, key)
        if name in fields and value is not None:
            kwargs[name] = value
    return variant(**kwargs)
