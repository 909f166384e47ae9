"""Registry of special forms for the quasi evaluator.

Maps call-head names to handler functions that receive their arguments
unevaluated. The evaluator consults this table before ordinary application.
"""

from quasi.evaluation.special_forms.quote_forms import quote_form, expr_form, exprs_form, quo_form, quos_form
from quasi.evaluation.special_forms.capture_forms import enexpr_form, enexprs_form, enquo_form, enquos_form
from quasi.evaluation.special_forms.lambda_form import lambda_form
from quasi.evaluation.special_forms.define_form import define_form
from quasi.evaluation.special_forms.progn_form import progn_form
from quasi.evaluation.special_forms.if_form import if_form

SPECIAL_FORMS = {
    "quote": quote_form,
    "expr": expr_form,
    "exprs": exprs_form,
    "quo": quo_form,
    "quos": quos_form,
    "enexpr": enexpr_form,
    "enexprs": enexprs_form,
    "enquo": enquo_form,
    "enquos": enquos_form,
    "function": lambda_form,
    "define": define_form,
    "progn": progn_form,
    "begin": progn_form,
    "if": if_form,
}
