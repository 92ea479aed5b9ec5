"""Text formatting helpers for CLI output."""

from tvdetrack.domain.entities import (
    ENTITY_TYPE_LABELS,
    EXPENSE_CATEGORY_LABELS,
    REGION_LABELS,
    EntityType,
    ExpenseCategory,
    Region,
)


def format_currency(amount: float) -> str:
    """Format an amount in euros with Portuguese separators.

    Examples:
        1234.5 -> "1 234,50 €"
        -20 -> "-20,00 €"
    """
    rounded = round(amount, 2)
    sign = "-" if rounded < 0 else ""
    digits = f"{abs(rounded):,.2f}"
    digits = digits.replace(",", " ").replace(".", ",")
    return f"{sign}{digits} €"


def format_percentage(value: float) -> str:
    """Format a percentage with up to two decimals (e.g. "21,4%")."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text.replace('.', ',')}%"


def category_label(category: ExpenseCategory | None) -> str:
    if category is None:
        return "Sem categoria"
    return EXPENSE_CATEGORY_LABELS.get(category, category.value)


def region_label(region: Region) -> str:
    return REGION_LABELS.get(region, region.value)


def entity_type_label(entity_type: EntityType) -> str:
    return ENTITY_TYPE_LABELS.get(entity_type, entity_type.value)
