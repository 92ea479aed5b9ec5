"""Domain model entities for tvdetrack.

These are pure data classes representing business concepts, independent of
database schema. Enumerations are str-valued so they persist and serialise
as their plain values.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from enum import Enum
from types import MappingProxyType
from typing import Optional

from tvdetrack.domain.errors import ValidationError


class Region(str, Enum):
    """Fiscal region of a driver."""

    CONTINENTAL = "continental"
    ACORES = "acores"
    MADEIRA = "madeira"


class EntityType(str, Enum):
    """Legal entity type of a driver."""

    ENI = "eni"
    EMPRESA = "empresa"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class ExpenseCategory(str, Enum):
    COMBUSTIVEL = "combustivel"
    MANUTENCAO = "manutencao"
    SEGURO_AUTOMOVEL = "seguro_automovel"
    IMPOSTO_CIRCULACAO = "imposto_circulacao"
    LICENCAS = "licencas"
    IMPOSTOS = "impostos"
    SEGURANCA_SOCIAL = "seguranca_social"
    IRC = "irc"
    TSU = "tsu"
    OUTROS = "outros"


class DerivedKind(str, Enum):
    """What an auto-generated tax entry represents."""

    VAT_ON_INCOME = "vat_on_income"
    INCOME_TAX_ESTIMATE = "income_tax_estimate"
    SOCIAL_SECURITY_ESTIMATE = "social_security_estimate"


class BackupType(str, Enum):
    MANUAL = "manual"
    AUTO = "auto"


class Period(str, Enum):
    """Reporting windows, resolved relative to a reference date."""

    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    SEMESTER = "semester"
    YEAR = "year"


REGION_LABELS = MappingProxyType(
    {
        Region.CONTINENTAL: "Portugal Continental",
        Region.ACORES: "Açores",
        Region.MADEIRA: "Madeira",
    }
)

ENTITY_TYPE_LABELS = MappingProxyType(
    {
        EntityType.ENI: "Empresário em Nome Individual",
        EntityType.EMPRESA: "Empresa (Soc. Unip. ou Lda)",
    }
)

EXPENSE_CATEGORY_LABELS = MappingProxyType(
    {
        ExpenseCategory.COMBUSTIVEL: "Combustível",
        ExpenseCategory.MANUTENCAO: "Manutenção/Oficina",
        ExpenseCategory.SEGURO_AUTOMOVEL: "Seguro Automóvel",
        ExpenseCategory.IMPOSTO_CIRCULACAO: "Imposto de Circulação (IUC)",
        ExpenseCategory.LICENCAS: "Licenças (e.g., TVDE)",
        ExpenseCategory.IMPOSTOS: "Impostos (IVA, IRS)",
        ExpenseCategory.SEGURANCA_SOCIAL: "Segurança Social",
        ExpenseCategory.IRC: "IRC",
        ExpenseCategory.TSU: "TSU",
        ExpenseCategory.OUTROS: "Outros",
    }
)

# Corporate tax categories, only selectable for empresa drivers
CORPORATE_ONLY_CATEGORIES = frozenset({ExpenseCategory.IRC, ExpenseCategory.TSU})


@dataclass(frozen=True)
class Platform:
    """Ride-hailing platform domain entity."""

    id: str
    name: str
    commission_rate: float


@dataclass(frozen=True)
class Vehicle:
    """Vehicle domain entity."""

    id: str
    name: str
    license_plate: str


@dataclass(frozen=True)
class Driver:
    """Driver domain entity.

    irs_rate and ss_rate are percentages and only used for ENI drivers.
    """

    id: str
    name: str
    region: Region
    entity_type: EntityType
    irs_rate: Optional[float] = None
    ss_rate: Optional[float] = None
    vehicle_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    A transaction with parent_id set is an auto-generated tax entry of that
    parent; derived_kind is set together with parent_id.
    """

    id: str
    date: date
    type: TransactionType
    amount: float
    description: str
    driver_id: str
    vehicle_id: str
    platform_id: Optional[str] = None
    category: Optional[ExpenseCategory] = None
    vat_amount: Optional[float] = None
    parent_id: Optional[str] = None
    derived_kind: Optional[DerivedKind] = None

    def __post_init__(self):
        if (self.parent_id is None) != (self.derived_kind is None):
            raise ValidationError(
                "parent_id and derived_kind must be set together"
            )
        if self.parent_id is not None and self.type != TransactionType.EXPENSE:
            raise ValidationError("Derived transactions must be expenses")

    @property
    def is_derived(self) -> bool:
        return self.parent_id is not None

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE


@dataclass(frozen=True)
class TransactionInput:
    """User-supplied transaction payload, before ids and derivation."""

    date: date
    type: TransactionType
    amount: float
    description: str
    driver_id: str
    vehicle_id: str
    platform_id: Optional[str] = None
    category: Optional[ExpenseCategory] = None
    vat_amount: Optional[float] = None


@dataclass(frozen=True)
class AppData:
    """Point-in-time copy of the four entity collections."""

    platforms: tuple[Platform, ...] = ()
    drivers: tuple[Driver, ...] = ()
    vehicles: tuple[Vehicle, ...] = ()
    transactions: tuple[Transaction, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (
            self.platforms or self.drivers or self.vehicles or self.transactions
        )


@dataclass(frozen=True)
class Backup:
    """Snapshot of the store."""

    id: str
    created_at: datetime
    type: BackupType
    data: AppData


@dataclass(frozen=True)
class SummaryFilter:
    """Filter for summary reports.

    driver_id and vehicle_id accept an id or "all". period and explicit
    dates are mutually exclusive.
    """

    driver_id: str = "all"
    vehicle_id: str = "all"
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    period: Optional[Period] = None

    def __post_init__(self):
        if self.period is not None and (
            self.start_date is not None or self.end_date is not None
        ):
            raise ValidationError(
                "A period cannot be combined with a start or end date"
            )
        if (
            self.start_date is not None
            and self.end_date is not None
            and self.start_date > self.end_date
        ):
            raise ValidationError(
                f"Start date {self.start_date} is after end date {self.end_date}"
            )


@dataclass(frozen=True)
class Totals:
    income: float = 0.0
    expense: float = 0.0

    @property
    def profit(self) -> float:
        return self.income - self.expense


@dataclass(frozen=True)
class PeriodSummary:
    """Income and expense for one reporting window."""

    period: Period
    start_date: date
    end_date: date
    totals: Totals


@dataclass(frozen=True)
class CategoryTotal:
    category: ExpenseCategory
    amount: float


@dataclass(frozen=True)
class DriverBreakdown:
    driver_id: str
    driver_name: str
    income: float
    expense: float

    @property
    def profit(self) -> float:
        return self.income - self.expense


@dataclass(frozen=True)
class VatCategoryBreakdown:
    """Manual expenses of one category and their deductible VAT."""

    category: Optional[ExpenseCategory]
    total: float
    vat: float


@dataclass(frozen=True)
class TaxSummary:
    """Estimated tax position for a set of transactions.

    iva_a_pagar is negative when deductible VAT exceeds VAT collected.
    """

    iva_liquidado: float = 0.0
    irs_estimado: float = 0.0
    ss_estimada: float = 0.0
    iva_dedutivel: float = 0.0
    manual_expense_total: float = 0.0
    vat_by_category: tuple[VatCategoryBreakdown, ...] = ()

    @property
    def iva_a_pagar(self) -> float:
        return self.iva_liquidado - self.iva_dedutivel

    @property
    def deductible_vat_percentage(self) -> float:
        if self.manual_expense_total <= 0:
            return 0.0
        return self.iva_dedutivel / self.manual_expense_total * 100


@dataclass(frozen=True)
class SummaryReport:
    """Everything the presentation layer needs for dashboards and reports."""

    summary_filter: SummaryFilter
    reference_date: date
    transactions: tuple[Transaction, ...]
    totals: Totals
    periods: tuple[PeriodSummary, ...]
    expenses_by_category: tuple[CategoryTotal, ...]
    drivers: tuple[DriverBreakdown, ...]
    taxes: TaxSummary = field(default_factory=TaxSummary)
