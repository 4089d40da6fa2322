"""
Evidence signal detection

Callers send either an evidence-strength label (Strong / Moderate / Weak) or
an FIR / statute section label such as "IPC 302". The kind is detected from
the text itself; there is no separate flag.
"""

import re
from dataclasses import dataclass
from typing import FrozenSet

from errors import InvalidInput


STRENGTH = 'strength'
SECTION = 'section'

STRENGTH_LABELS = ('strong', 'moderate', 'weak')

# Homicide and sexual-assault equivalents
SERIOUS_SECTIONS = frozenset(['302', '303', '304', '304B', '307', '376', '376A', '376D', '396', '364A'])

# Simple hurt, restraint, insult and intimidation equivalents
MINOR_SECTIONS = frozenset(['323', '341', '294', '504', '506', '509'])

_STATUTE_KEYWORDS = re.compile(r"\b(IPC|CrPC|NDPS|BNS|Section|Sec|u/s|Act)\b", re.IGNORECASE)
# Digits may sit right next to letters or slashes: IPC302, u/s302, 302/34
_SECTION_TOKEN = re.compile(r"(?<!\d)(\d+[A-Z]?)(?![\dA-Z])", re.IGNORECASE)


@dataclass(frozen=True)
class EvidenceSignal:
    """
    A classified evidence signal

    tier is strong / moderate / weak for strength labels and
    serious / minor / unclassified for section labels.
    """
    kind: str
    tier: str
    label: str
    sections: FrozenSet[str] = frozenset()

    @property
    def is_section(self) -> bool:
        return self.kind == SECTION


def section_tokens(label: str) -> FrozenSet[str]:
    """Extract section numbers like 302 or 304A from a label"""
    return frozenset(token.upper() for token in _SECTION_TOKEN.findall(label))


def classify_signal(signal: str) -> EvidenceSignal:
    """
    Detect the kind and tier of an evidence signal

    Args:
        signal: Strength label or statute section label

    Returns:
        EvidenceSignal

    Raises:
        InvalidInput: if the signal is empty or neither kind
    """
    if not isinstance(signal, str) or not signal.strip():
        raise InvalidInput("evidence_signal is required")

    label = signal.strip()
    lowered = label.lower()

    if lowered in STRENGTH_LABELS:
        return EvidenceSignal(kind=STRENGTH, tier=lowered, label=label)

    has_digit = any(ch.isdigit() for ch in label)
    if not has_digit and not _STATUTE_KEYWORDS.search(label):
        raise InvalidInput(
            f"evidence_signal {label!r} is neither an evidence strength "
            f"(Strong/Moderate/Weak) nor a statute section"
        )

    tokens = section_tokens(label)
    if tokens & SERIOUS_SECTIONS:
        tier = 'serious'
    elif tokens & MINOR_SECTIONS:
        tier = 'minor'
    else:
        tier = 'unclassified'

    return EvidenceSignal(kind=SECTION, tier=tier, label=label, sections=tokens)


def strength_tier(signal: EvidenceSignal) -> str:
    """Collapse both signal kinds onto strong / moderate / weak"""
    if signal.tier in ('strong', 'serious'):
        return 'strong'
    if signal.tier in ('weak', 'minor'):
        return 'weak'
    return 'moderate'


def describe_signal(signal: EvidenceSignal) -> str:
    """Short phrase used inside explanation sentences"""
    if signal.is_section:
        return f"charges under {signal.label}"
    return f"{signal.tier} evidence"
