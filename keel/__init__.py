# Core type aliases for keel's data model.
# Forms and runtime values are plain Python values (int, float, str, list, dict, None)
# plus the few wrapper types in keel.types (Symbol, Vector). There is no Cons type.
#
# Naming guidance:
# - Form:  use in reader/evaluator code to denote syntactic forms (code-as-data).
# - Value: use in runtime/namespace code to denote evaluated values.
# Both resolve to `Any`; the split only documents intent.

from typing import Any, Callable

__version__ = "0.3.0"

# Runtime value alias
Value = Any
# Forms as produced by the reader
Form = Value

# Evaluator function type handed to special forms
EvaluatorFn = Callable[..., Value]
