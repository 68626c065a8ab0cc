from salon.util.errors import InvalidInput


def reject_nulls(fields: dict, nullable: tuple[str, ...] = ()) -> None:
    """Patch payloads may only clear the keys listed in `nullable`."""
    bad = sorted(k for k, v in fields.items() if v is None and k not in nullable)
    if bad:
        raise InvalidInput(f"{', '.join(bad)} cannot be null")


def non_negative(fields: dict, *keys: str) -> None:
    for k in keys:
        v = fields.get(k)
        if v is not None and v < 0:
            raise InvalidInput(f"{k} must be >= 0")
