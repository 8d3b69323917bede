"""
Bilingual Message Catalog.

Maps a fixed message key to its text in every locale. The engine only picks
keys; choosing the locale to display is the caller's business.
"""

from enum import Enum
from typing import Dict

from models import BilingualText, Locale


class MessageKey(str, Enum):
    # --- Explanations ---
    PRE_OVULATION_INFERTILE = "pre_ovulation_infertile"
    FERTILE_MUCUS_STARTED = "fertile_mucus_started"
    FERTILE_WAITING_DOUBLE_CHECK = "fertile_waiting_double_check"
    POST_OVULATION_INFERTILE = "post_ovulation_infertile"

    # --- Warnings ---
    LONG_CYCLE = "long_cycle"
    AMENORRHEA = "amenorrhea"
    PEAK_RETURNED = "peak_returned"
    NO_TEMP_SHIFT = "no_temp_shift"
    NO_CERVIX_SHIFT = "no_cervix_shift"


CATALOG: Dict[MessageKey, Dict[Locale, str]] = {
    MessageKey.PRE_OVULATION_INFERTILE: {
        Locale.FR: "Période infertile en début de cycle",
        Locale.EN: "Infertile period at the beginning of the cycle",
    },
    MessageKey.FERTILE_MUCUS_STARTED: {
        Locale.FR: "Glaire cervicale observée - période fertile",
        Locale.EN: "Cervical mucus observed - fertile period",
    },
    MessageKey.FERTILE_WAITING_DOUBLE_CHECK: {
        Locale.FR: "En attente de confirmation double-check",
        Locale.EN: "Waiting for double-check confirmation",
    },
    MessageKey.POST_OVULATION_INFERTILE: {
        Locale.FR: "Période infertile après ovulation confirmée",
        Locale.EN: "Infertile period after confirmed ovulation",
    },
    MessageKey.LONG_CYCLE: {
        Locale.FR: "Cycle très long détecté (>60 jours)",
        Locale.EN: "Very long cycle detected (>60 days)",
    },
    MessageKey.AMENORRHEA: {
        Locale.FR: "Pas de règles depuis plus de 90 jours - consultation recommandée",
        Locale.EN: "No period for more than 90 days - consultation recommended",
    },
    MessageKey.PEAK_RETURNED: {
        Locale.FR: "Retour à qualité de glaire élevée - comptage recommencé",
        Locale.EN: "Return to high mucus quality - count restarted",
    },
    MessageKey.NO_TEMP_SHIFT: {
        Locale.FR: "Pas de décalage de température confirmé",
        Locale.EN: "No confirmed temperature shift",
    },
    MessageKey.NO_CERVIX_SHIFT: {
        Locale.FR: "Col pas encore fermé et dur depuis 3 jours",
        Locale.EN: "Cervix not yet closed and hard for 3 days",
    },
}


def message(key: MessageKey) -> BilingualText:
    """Build the bilingual text for a key."""
    texts = CATALOG[key]
    return BilingualText(fr=texts[Locale.FR], en=texts[Locale.EN])
