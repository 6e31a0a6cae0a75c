# syrupcalc/texts.py
# Тексты интерфейса (бот и веб-страница)

TITLE = "Pediatric Syrup Calculator"

BTN_BY_WEIGHT = "⚖️ By Weight (kg)"
BTN_BY_AGE = "📅 By Age (yr)"
BTN_CLEAR = "🧹 Clear"

ASK_WEIGHT = "Enter weight in kg, for example: 11.2"
ASK_AGE = "Enter age in years, for example: 2"
BAD_NUMBER = "Couldn't read that 😅 Please send just a number, for example: 11.2"

FORMULA_FOOTER = (
    "The calculation is based on Amount per Dose.\n"
    "Formula: ((Dose_mg * Weight) * Vol_ml) / Conc_mg"
)

DISCLAIMER = (
    "Important: this is a reference tool, not a doctor. "
    "Check the label and ask a pediatrician if in doubt. "
    "In an emergency call your local emergency number."
)

CREDIT = "تم التطوير و البرمجه من قبل عم زيكو"
