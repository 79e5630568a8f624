"""
Units of measure for items and product lines.

Mass and volume units convert within their family. Packaging units
(unidade, pacote, caixa) only convert to themselves.
"""
from decimal import Decimal
from enum import Enum
from typing import Dict, Tuple, Union

Number = Union[int, float, Decimal]


class Unit(str, Enum):
    g = "g"
    kg = "kg"
    mg = "mg"
    oz = "oz"
    lb = "lb"
    ml = "ml"
    l = "l"
    unidade = "unidade"
    pacote = "pacote"
    caixa = "caixa"


UNIT_LABELS: Dict[Unit, str] = {
    Unit.g: "Gramas",
    Unit.kg: "Quilogramas",
    Unit.mg: "Miligramas",
    Unit.oz: "Onças",
    Unit.lb: "Libras",
    Unit.ml: "Mililitros",
    Unit.l: "Litros",
    Unit.unidade: "Unidade",
    Unit.pacote: "Pacote",
    Unit.caixa: "Caixa",
}

CUSTOM_UNITS = {Unit.unidade, Unit.pacote, Unit.caixa}

# (family, size of one unit in the family's base unit: grams or millilitres)
_FACTORS: Dict[Unit, Tuple[str, Decimal]] = {
    Unit.mg: ("mass", Decimal("0.001")),
    Unit.g: ("mass", Decimal("1")),
    Unit.kg: ("mass", Decimal("1000")),
    Unit.oz: ("mass", Decimal("28.349523125")),
    Unit.lb: ("mass", Decimal("453.59237")),
    Unit.ml: ("volume", Decimal("1")),
    Unit.l: ("volume", Decimal("1000")),
}

# Prices are entered per kg / l while quantities are entered in g / ml (or mg).
_PRICE_BASIS: Dict[Unit, Decimal] = {
    Unit.g: Decimal("1000"),
    Unit.ml: Decimal("1000"),
    Unit.mg: Decimal("1000000"),
}


class UnitConversionError(ValueError):
    pass


def _as_unit(unit: Union[str, Unit]) -> Unit:
    try:
        return Unit(unit)
    except ValueError:
        raise UnitConversionError(f"Unidade desconhecida: {unit}")


def price_basis_quantity(unit: Union[str, Unit]) -> Decimal:
    """Quantity of `unit` that the item's price refers to."""
    return _PRICE_BASIS.get(_as_unit(unit), Decimal("1"))


def convert_unit(value: Number, from_unit: Union[str, Unit], to_unit: Union[str, Unit]) -> Decimal:
    """
    Convert `value` from one unit to another.

    Raises:
        UnitConversionError: when the units belong to different families or
            one of them is a packaging unit.
    """
    source = _as_unit(from_unit)
    target = _as_unit(to_unit)
    amount = Decimal(str(value))
    if source == target:
        return amount

    if source in CUSTOM_UNITS or target in CUSTOM_UNITS:
        raise UnitConversionError(
            "Não é possível converter entre unidades customizadas e unidades de medida padrão"
        )

    source_family, source_factor = _FACTORS[source]
    target_family, target_factor = _FACTORS[target]
    if source_family != target_family:
        raise UnitConversionError(f"Não foi possível converter de {source.value} para {target.value}")
    return amount * source_factor / target_factor


def units_compatible(first: Union[str, Unit], second: Union[str, Unit]) -> bool:
    try:
        convert_unit(1, first, second)
    except UnitConversionError:
        return False
    return True


def format_quantity(value: Number, unit: Union[str, Unit]) -> str:
    unit = _as_unit(unit)
    amount = Decimal(str(value))
    if unit == Unit.g and amount >= 1000:
        return f"{amount / 1000:.2f} kg"
    if unit == Unit.mg and amount >= 1000:
        return f"{amount / 1000:.2f} g"
    if unit == Unit.ml and amount >= 1000:
        return f"{amount / 1000:.2f} l"
    return f"{value} {unit.value}"
