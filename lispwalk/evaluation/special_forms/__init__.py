"""Registry of special forms for the lispwalk evaluator.

Maps Symbols to handler functions that implement non-standard evaluation rules.
The evaluator consults this table before ordinary procedure application, so
these names cannot be rebound as procedures.
"""

from lispwalk.types.symbol import Symbol
from lispwalk.evaluation.special_forms.begin_form import begin_form
from lispwalk.evaluation.special_forms.cond_form import cond_form
from lispwalk.evaluation.special_forms.define_form import define_form
from lispwalk.evaluation.special_forms.if_form import if_form
from lispwalk.evaluation.special_forms.import_form import import_form
from lispwalk.evaluation.special_forms.lambda_form import lambda_form
from lispwalk.evaluation.special_forms.let_form import let_form
from lispwalk.evaluation.special_forms.logic_forms import and_form, or_form
from lispwalk.evaluation.special_forms.quote_forms import quote_form, quasiquote_form, unquote_form, unquote_splice_form
from lispwalk.evaluation.special_forms.set_form import set_form

SPECIAL_FORMS = {
    Symbol("quote"): quote_form,
    Symbol("quasiquote"): quasiquote_form,
    Symbol("unquote"): unquote_form,
    Symbol("unquote-splicing"): unquote_splice_form,
    Symbol("if"): if_form,
    Symbol("define"): define_form,
    Symbol("set!"): set_form,
    Symbol("lambda"): lambda_form,
    Symbol("begin"): begin_form,
    Symbol("let"): let_form,
    Symbol("cond"): cond_form,
    Symbol("and"): and_form,
    Symbol("or"): or_form,
    Symbol("import"): import_form,
}
