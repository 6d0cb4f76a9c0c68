"""
Actionable Advice Registry

Closed, statically curated guidance data. Adding guidance is a data
change here, never generated text. Does NOT affect inference or the
replay gate.

Bump ADVICE_REGISTRY_VERSION when any entry changes.
"""

from typing import Dict, List

from .models import AdviceEntry


ADVICE_REGISTRY_VERSION = "14a.1"

_EMERGENCY = "If trouble breathing, seek emergency care immediately."
_NOT_MEDICAL_ADVICE = "This is general guidance, not medical advice. Follow your allergist's plan."
_STANDARD_DISCLAIMERS: List[str] = [_EMERGENCY, _NOT_MEDICAL_ADVICE]


# Used by callers when a match exists but the registry has no entry for it.
GENERAL_SAFETY_FALLBACK = AdviceEntry(
    id="fallback:general_safety",
    level="parent",
    target="general",
    title="General Safety",
    symptoms_to_watch=[
        "Hives, itching, or swelling",
        "Tingling in mouth or throat",
        "Difficulty breathing or wheezing",
        "Stomach upset or vomiting",
    ],
    immediate_actions=[
        "Stop eating immediately",
        "Rinse mouth with water",
        "Use epinephrine auto-injector if prescribed",
        "Seek emergency care for severe symptoms",
    ],
    education=[
        "When in doubt, avoid the food until you can confirm with your allergist.",
        "Check labels and ask about ingredients when dining out.",
    ],
    disclaimers=[
        _EMERGENCY,
        "Standard guidance only. Consult a professional in emergencies.",
    ],
)


_ENTRIES: List[AdviceEntry] = [
    # ── Parent-level advice ─────────────────────────────────────────
    AdviceEntry(
        id="parent:tree_nut",
        level="parent",
        target="tree_nut",
        title="Tree Nut Allergy",
        symptoms_to_watch=[
            "Hives, itching, or swelling",
            "Tingling in mouth or throat",
            "Stomach pain, nausea, or vomiting",
            "Difficulty breathing or wheezing",
            "Dizziness or lightheadedness",
        ],
        immediate_actions=[
            "Stop eating immediately",
            "Rinse mouth with water",
            "Use epinephrine auto-injector if prescribed",
            "Call 911 if severe symptoms develop",
        ],
        education=[
            "Tree nuts include almond, walnut, cashew, pistachio, pecan, hazelnut, Brazil nut, pine nut, macadamia.",
            "Check labels for \"may contain\" or \"processed in facility with tree nuts.\"",
            "Cross-contamination is common in bakeries and ice cream shops.",
        ],
        disclaimers=_STANDARD_DISCLAIMERS,
    ),
    AdviceEntry(
        id="parent:shellfish",
        level="parent",
        target="shellfish",
        title="Shellfish Allergy",
        symptoms_to_watch=[
            "Hives or skin rash",
            "Swelling of lips, face, or throat",
            "Stomach cramps or diarrhea",
            "Wheezing or difficulty breathing",
            "Anaphylaxis (severe allergic reaction)",
        ],
        immediate_actions=[
            "Stop eating immediately",
            "Use epinephrine auto-injector if prescribed",
            "Seek emergency care for severe reactions",
            "Antihistamines may help mild symptoms only",
        ],
        education=[
            "Shellfish includes shrimp, crab, lobster, scallop, oyster, mussel.",
            "Crustaceans (shrimp, crab, lobster) and mollusks (scallop, oyster, mussel) may differ in reactivity.",
            "Avoid fish sauce, surimi, and some Asian sauces that may contain shellfish.",
        ],
        disclaimers=_STANDARD_DISCLAIMERS,
    ),
    AdviceEntry(
        id="parent:peanut",
        level="parent",
        target="peanut",
        title="Peanut Allergy",
        symptoms_to_watch=[
            "Skin reactions (hives, redness, swelling)",
            "Itching or tingling in mouth",
            "Digestive upset",
            "Shortness of breath or throat tightness",
            "Anaphylaxis",
        ],
        immediate_actions=[
            "Stop eating immediately",
            "Use epinephrine auto-injector if prescribed",
            "Call 911 for severe reactions",
            "Stay calm; lying flat can worsen blood pressure drop",
        ],
        education=[
            "Peanuts are legumes, not tree nuts. Many people allergic to peanuts can safely eat tree nuts.",
            "Cross-contamination is common. Avoid shared equipment and bulk bins.",
            "Peanut oil (refined) may be tolerated by some; cold-pressed or gourmet oils may contain protein.",
        ],
        disclaimers=_STANDARD_DISCLAIMERS,
    ),
    AdviceEntry(
        id="parent:fish",
        level="parent",
        target="fish",
        title="Fish Allergy",
        symptoms_to_watch=[
            "Hives or eczema flare",
            "Swelling of lips or face",
            "Nausea, vomiting, or diarrhea",
            "Wheezing or difficulty breathing",
            "Anaphylaxis",
        ],
        immediate_actions=[
            "Stop eating immediately",
            "Use epinephrine auto-injector if prescribed",
            "Seek emergency care for severe reactions",
        ],
        education=[
            "Fish allergy is distinct from shellfish allergy. Some people are allergic to one or both.",
            "Fish can be hidden in Worcestershire sauce, Caesar dressing, and some Asian dishes.",
            "Fish gelatin and fish oil supplements may contain fish protein.",
        ],
        disclaimers=_STANDARD_DISCLAIMERS,
    ),
    AdviceEntry(
        id="parent:sesame",
        level="parent",
        target="sesame",
        title="Sesame Allergy",
        symptoms_to_watch=[
            "Hives or rash",
            "Swelling of face or throat",
            "Stomach pain or vomiting",
            "Wheezing or difficulty breathing",
            "Anaphylaxis",
        ],
        immediate_actions=[
            "Stop eating immediately",
            "Use epinephrine auto-injector if prescribed",
            "Seek emergency care for severe reactions",
        ],
        education=[
            "Sesame is now a major allergen requiring labeling in the US.",
            "Found in tahini, hummus, bagels, crackers, and many ethnic cuisines.",
            "Sesame oil (especially toasted) can contain protein and trigger reactions.",
        ],
        disclaimers=_STANDARD_DISCLAIMERS,
    ),

    # ── Term-level advice (overrides parent when matched) ───────────
    AdviceEntry(
        id="term:mango",
        level="term",
        target="mango",
        title="Mango (Cross-Reactive with Latex/Tree Nut)",
        symptoms_to_watch=[
            "Itching or tingling in mouth (OAS)",
            "Hives or rash, especially around mouth",
            "Swelling of lips or throat",
            "Stomach upset",
        ],
        immediate_actions=[
            "Stop eating immediately",
            "Rinse mouth with water",
            "Use epinephrine if prescribed and symptoms are severe",
        ],
        education=[
            "Mango can cross-react with latex or certain tree nuts due to similar proteins.",
            "Oral allergy syndrome (OAS) may cause mild mouth itching without full anaphylaxis.",
            "Peeling mango may reduce contact with allergenic compounds in the skin.",
        ],
        disclaimers=_STANDARD_DISCLAIMERS,
    ),
    AdviceEntry(
        id="term:almond",
        level="term",
        target="almond",
        title="Almond Allergy",
        symptoms_to_watch=[
            "Hives, itching, or swelling",
            "Tingling in mouth or throat",
            "Stomach pain or vomiting",
            "Difficulty breathing",
        ],
        immediate_actions=[
            "Stop eating immediately",
            "Rinse mouth with water",
            "Use epinephrine auto-injector if prescribed",
            "Call 911 if severe symptoms develop",
        ],
        education=[
            "Almond is a tree nut. Almond milk, marzipan, and many baked goods contain almond.",
            "Almond extract and almond oil may contain protein; check with your allergist.",
            "Cross-contamination is common in nut-free facilities that also process almonds.",
        ],
        disclaimers=_STANDARD_DISCLAIMERS,
    ),
]

ADVICE_REGISTRY: Dict[str, AdviceEntry] = {entry.id: entry for entry in _ENTRIES}
