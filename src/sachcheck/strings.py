"""Localized UI strings."""

from typing import Dict

from .domain.models import Language, Verdict

UI_STRINGS: Dict[str, Dict[Language, str]] = {
    "app_name": {
        Language.HINDI: "सत्यप्रमाण",
        Language.ENGLISH: "SachCheck",
        Language.BHOJPURI: "सच चेक",
    },
    "tagline": {
        Language.HINDI: "सत्यापन केंद्र",
        Language.ENGLISH: "Verification Hub",
        Language.BHOJPURI: "जाँच केंद्र",
    },
    "placeholder": {
        Language.HINDI: "लिंक टाइप करें या दावे का वर्णन करें...",
        Language.ENGLISH: "Type a link or describe the claim...",
        Language.BHOJPURI: "लिंक लिखीं चाहे दावा बताईं...",
    },
    "check_button": {
        Language.HINDI: "जाँचें",
        Language.ENGLISH: "Check",
        Language.BHOJPURI: "जाँचीं",
    },
    "welcome": {
        Language.HINDI: (
            "सत्यापन हब में आपका स्वागत है। 👋 मैं राजनीतिक दावों और संदेशों की वास्तविक समय में "
            "पुष्टि कर सकता हूँ। शुरू करने के लिए कोई लिंक साझा करें, फोटो अपलोड करें या बोलकर पूछें।"
        ),
        Language.ENGLISH: (
            "Welcome to the Verification Hub. 👋 I can verify political claims and messages in "
            "real-time. Share a link, upload a photo, or ask to get started."
        ),
        Language.BHOJPURI: (
            "सत्यापन हब में राउर स्वागत बा। 👋 हम राजनीतिक दावा अउरी संदेशन के तुरंत जांच कर सकिला। "
            "शुरू करे खातिर कौनों लिंक भेजीं, फोटो अपलोड करीं भा बोल के पूछीं।"
        ),
    },
    "verdict_true": {
        Language.HINDI: "SAHI",
        Language.ENGLISH: "TRUE",
        Language.BHOJPURI: "SAHI",
    },
    "verdict_false": {
        Language.HINDI: "GALAT",
        Language.ENGLISH: "FALSE",
        Language.BHOJPURI: "GALAT",
    },
    "verdict_misleading": {
        Language.HINDI: "BHRAMAK",
        Language.ENGLISH: "MISLEADING",
        Language.BHOJPURI: "BHRAMAK",
    },
    "sources_title": {
        Language.HINDI: "स्रोत लिंक:",
        Language.ENGLISH: "Source Links:",
        Language.BHOJPURI: "स्रोत लिंक:",
    },
    "quick_check": {
        Language.HINDI: "उरुवा बाज़ार डेली न्यूज़",
        Language.ENGLISH: "Uruwa Bazar Daily Newz",
        Language.BHOJPURI: "उरुवा बाज़ार डेली न्यूज़",
    },
    "typing": {
        Language.HINDI: "सत्यापन जारी है...",
        Language.ENGLISH: "Verifying...",
        Language.BHOJPURI: "जाँच चालू बा...",
    },
}

_VERDICT_KEYS = {
    Verdict.TRUE: "verdict_true",
    Verdict.FALSE: "verdict_false",
    Verdict.MISLEADING: "verdict_misleading",
}


def t(key: str, language: Language) -> str:
    """Look up a UI string, falling back to English."""
    entry = UI_STRINGS[key]
    return entry.get(language, entry[Language.ENGLISH])


def verdict_label(verdict: Verdict, language: Language) -> str:
    """Display label for a verdict in the given language."""
    key = _VERDICT_KEYS.get(verdict)
    return t(key, language) if key else "UNVERIFIED"
