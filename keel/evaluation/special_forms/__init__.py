"""Registry of special forms for the keel evaluator.

Maps Symbols to handler functions that implement non-standard evaluation rules.
The evaluator consults this table before ordinary function application.
"""

from keel.types.symbol import Symbol
from keel.evaluation.special_forms.module_form import module_form
from keel.evaluation.special_forms.define_forms import (
    def_form,
    def_private_form,
    defonce_form,
    defonce_private_form,
    defn_form,
    defn_private_form,
)
from keel.evaluation.special_forms.binding_forms import fn_form, local_form, let_form
from keel.evaluation.special_forms.control_forms import do_form, if_form

SPECIAL_FORMS = {
    Symbol("module"): module_form,
    Symbol("def"): def_form,
    Symbol("def-"): def_private_form,
    Symbol("defonce"): defonce_form,
    Symbol("defonce-"): defonce_private_form,
    Symbol("defn"): defn_form,
    Symbol("defn-"): defn_private_form,
    Symbol("fn"): fn_form,
    Symbol("local"): local_form,
    Symbol("let"): let_form,
    Symbol("do"): do_form,
    Symbol("if"): if_form,
}
