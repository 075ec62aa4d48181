from typing import Dict, List, Union
import hashlib
import json

from errors import ErrorCode, NumericError
from parsing import parse_float_strict, parse_int_strict
from rendering import canonical
from values import Float, Integer

Number = Union[Integer, Float]

INTEGER_TAG = "__integer__"
FLOAT_TAG = "__float__"


class NumberEncoder(json.JSONEncoder):
    """Stores an Integer or Float as its canonical text under a type tag."""
    def default(self, obj):
        if isinstance(obj, Integer):
            return {INTEGER_TAG: canonical(obj)}
        if isinstance(obj, Float):
            return {FLOAT_TAG: canonical(obj)}
        return super().default(obj)


def decode_number(obj: Dict):
    """json object_hook: rebuild tagged values with the strict parsers."""
    if INTEGER_TAG in obj:
        return parse_int_strict(obj[INTEGER_TAG])
    if FLOAT_TAG in obj:
        return parse_float_strict(obj[FLOAT_TAG])
    return obj


def dumps(obj, **kwargs) -> str:
    return json.dumps(obj, cls=NumberEncoder, **kwargs)


def loads(text: str):
    return json.loads(text, object_hook=decode_number)


def values_hash(values: List[Number]) -> str:
    h = hashlib.sha256()
    for v in values:
        h.update(canonical(v).encode("utf-8"))
        h.update(b"\n")
    return h.hexdigest()


def save_values(values: List[Number], filename: str):
    summary = {}
    summary["hash"] = values_hash(values)
    summary["count"] = len(values)
    summary["values"] = values

    with open(filename, "w") as f:
        f.write(dumps(summary, indent=2))
        f.flush()


def load_values(filename: str) -> List[Number]:
    with open(filename, "r") as f:
        summary = loads(f.read())
    values = summary["values"]
    if summary["count"] != len(values):
        raise NumericError(ErrorCode.INVALID_FORMAT, f"expected {summary['count']} values, found {len(values)}")
    if values_hash(values) != summary["hash"]:
        raise NumericError(ErrorCode.INVALID_FORMAT, f"hash mismatch in {filename}")
    return values
