from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List

from .errors import ValidationError

STRING_FIELDS = ('category', 'location', 'name')

# field -> minimum allowed value
INTEGER_FIELDS = {
    'duration_mins': 1,
    'num_teams': 1,
    'team_size': 1,
    'signup_fee_cents': 0,
    'split_fee_cents': 0,
}

# upper bound of the Integer columns these are stored in
MAX_INTEGER = 2**31 - 1


@dataclass
class NewGameRequest:
    category: str
    location: str
    name: str
    start_time: datetime
    duration_mins: int
    num_teams: int
    team_size: int
    signup_fee_cents: int
    split_fee_cents: int


def parse_instant(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if value.endswith('Z'):
        value = value[:-1] + '+00:00'
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_new_game_request(data: Any) -> NewGameRequest:
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")

    missing: List[str] = []
    invalid: List[str] = []
    values: Dict[str, Any] = {}

    for name in STRING_FIELDS:
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
        elif not isinstance(value, str):
            invalid.append(name)
        else:
            values[name] = value.strip()

    for name, minimum in INTEGER_FIELDS.items():
        value = data.get(name)
        if value is None:
            missing.append(name)
        # bool is an int subclass; reject it explicitly
        elif isinstance(value, bool) or not isinstance(value, int) or not minimum <= value <= MAX_INTEGER:
            invalid.append(name)
        else:
            values[name] = value

    start_time = data.get('start_time')
    if not start_time:
        missing.append('start_time')
    elif not isinstance(start_time, str):
        invalid.append('start_time')
    else:
        try:
            values['start_time'] = parse_instant(start_time)
        except (ValueError, OverflowError):
            invalid.append('start_time')

    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(sorted(missing))}",
            fields=sorted(missing + invalid)
        )
    if invalid:
        raise ValidationError(
            f"Invalid fields: {', '.join(sorted(invalid))}",
            fields=sorted(invalid)
        )

    return NewGameRequest(**values)


def require_participant(participant: Any) -> str:
    if not isinstance(participant, str) or not participant.strip():
        raise ValidationError("A participant identifier is required", fields=['participant'])
    return participant
