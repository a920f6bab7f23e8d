from typing import Dict, List

# --- Standard Allergen Catalog ---
# Items that must be disclosed on labels (8)
MANDATORY_ALLERGENS: List[str] = [
    "shrimp", "crab", "walnut", "wheat", "buckwheat", "egg", "milk", "peanut",
]

# Items whose disclosure is recommended (20)
RECOMMENDED_ALLERGENS: List[str] = [
    "almond", "abalone", "squid", "salmon roe", "orange", "cashew nut",
    "kiwifruit", "beef", "sesame", "salmon", "mackerel", "soybean", "chicken",
    "banana", "pork", "matsutake", "peach", "yam", "apple", "gelatin",
]

STANDARD_ALLERGENS: List[str] = MANDATORY_ALLERGENS + RECOMMENDED_ALLERGENS

# --- Verdict Display ---
# Severity rank; higher is worse. The dish verdict is the max over its ingredients.
VERDICT_SEVERITY: Dict[str, int] = {
    "OK": 0,
    "NEEDS_REVIEW": 1,
    "NG": 2,
}

VERDICT_ICONS: Dict[str, str] = {
    "OK": "○",
    "NEEDS_REVIEW": "△",
    "NG": "✕",
}

# Labels shown to kitchen staff
VERDICT_LABELS: Dict[str, str] = {
    "OK": "OK",
    "NEEDS_REVIEW": "要確認",
    "NG": "NG",
}

# --- Customization Display ---
# "none" (exclusions only) intentionally has no label
CUSTOMIZATION_LABELS: Dict[str, str] = {
    "replace": "replaced",
    "modify": "modified",
    "remove": "removed",
}
