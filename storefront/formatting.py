# ==============================================================================
# HELPERS DE FORMATO
# ==============================================================================
# Moneda (R$), CPF, fechas locales y forma farmacéutica derivada del nombre.
# ==============================================================================

import re
from datetime import datetime, timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_NON_DIGITS = re.compile(r'\D')

# Fragmento del nombre (pinyin) → forma farmacéutica
DOSAGE_FORMS = (
    ('jiaonang', 'Cápsula'),
    ('pian', 'Comprimido'),
    ('wan', 'Pílula'),
    ('spray', 'Spray'),
    ('tubo', 'Pomada'),
)


def format_currency(amount: Any) -> str:
    """Formatea dinero en pt-BR: R$ 1.234,56"""
    try:
        value = float(amount)
    except (TypeError, ValueError):
        return f"R$ {amount}"
    sign = '-' if value < 0 else ''
    text = f"{abs(value):,.2f}"  # 1,234.56
    text = text.replace(',', '_').replace('.', ',').replace('_', '.')
    return f"{sign}R$ {text}"


def cpf_digits(cpf: Optional[str]) -> str:
    """Solo los dígitos del CPF."""
    return _NON_DIGITS.sub('', cpf or '')


def format_cpf(raw: Optional[str]) -> str:
    """
    Aplica la máscara ###.###.###-## a medida que hay dígitos.
    Se descartan los dígitos después del 11.
    """
    digits = cpf_digits(raw)[:11]
    if len(digits) > 9:
        return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"
    if len(digits) > 6:
        return f"{digits[:3]}.{digits[3:6]}.{digits[6:]}"
    if len(digits) > 3:
        return f"{digits[:3]}.{digits[3:]}"
    return digits


def get_dosage_form(product_name: str) -> Optional[str]:
    """Forma farmacéutica según el nombre, o None."""
    lower = (product_name or '').lower()
    for fragment, label in DOSAGE_FORMS:
        if fragment in lower:
            return label
    return None


def format_local_datetime(iso_ts: str, tz_name: str = 'America/Sao_Paulo') -> str:
    """
    Timestamp ISO → 'dd/mm/YYYY HH:MM' en la zona de la tienda.
    Si no se puede leer, retorna el texto original.
    """
    try:
        dt = datetime.fromisoformat((iso_ts or '').replace('Z', '+00:00'))
    except ValueError:
        return iso_ts or ''
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    try:
        dt = dt.astimezone(ZoneInfo(tz_name))
    except (ZoneInfoNotFoundError, ValueError):
        pass
    return dt.strftime('%d/%m/%Y %H:%M')
