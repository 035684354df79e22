from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal('0.01')
TOKEN_PRECISION = Decimal('0.00000001')


def to_decimal(value):
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_usd(value):
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def quantize_tokens(value):
    return to_decimal(value).quantize(TOKEN_PRECISION, rounding=ROUND_HALF_UP)


def add_years(moment, years):
    """Calendar-year offset; Feb 29 rolls over to Mar 1"""
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        return moment.replace(year=moment.year + years, month=3, day=1)
