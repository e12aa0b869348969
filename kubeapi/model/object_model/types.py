from typing import Any, Dict

RawObject = Dict[str, Any]
