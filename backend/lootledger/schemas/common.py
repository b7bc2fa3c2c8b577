from decimal import Decimal
from typing import Annotated

from pydantic import PlainSerializer

# Beträge intern als Decimal, im JSON als Zahl (nicht als String)
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
