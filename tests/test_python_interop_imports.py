import math

import pytest

from lispwalk.errors import LispImportError, LispTypeError, LispUnboundSymbol


def test_import_binds_last_name_component(bare_interp):
    assert bare_interp.eval('(import "os.path")') is None
    assert bare_interp.eval('(path:basename "/tmp/file.txt")') == "file.txt"


def test_import_with_alias(bare_interp):
    bare_interp.eval('(import "math" as m)')
    assert bare_interp.eval("(m:sqrt 16.0)") == 4.0
    assert bare_interp.eval("m:pi") == math.pi


def test_import_accepts_a_symbol_name(bare_interp):
    bare_interp.eval("(import math)")
    assert bare_interp.eval("(math:floor 2.7)") == 2


def test_dotted_attribute_access(bare_interp):
    bare_interp.eval('(import "collections" as c)')
    assert bare_interp.eval("c:OrderedDict.__name__") == "OrderedDict"


def test_python_callables_work_with_higher_order_builtins(bare_interp):
    bare_interp.eval('(import "math")')
    assert bare_interp.eval("(map math:factorial '(3 4))") == [6, 24]


def test_missing_attribute(bare_interp):
    bare_interp.eval('(import "math")')
    with pytest.raises(LispUnboundSymbol):
        bare_interp.eval("(math:no_such_function 1)")


def test_calling_a_non_callable_attribute(bare_interp):
    bare_interp.eval('(import "math")')
    with pytest.raises(LispTypeError):
        bare_interp.eval("(math:pi)")


def test_missing_module_points_at_explain_import(bare_interp):
    with pytest.raises(LispImportError, match="explain-import"):
        bare_interp.eval('(import "lispwalk_no_such_module")')


def test_explain_import_builtin(bare_interp):
    text = bare_interp.eval('(explain-import "lispwalk_no_such_module")')
    assert text.startswith("import resolution for 'lispwalk_no_such_module'")
    assert "not found" in text


def test_explain_import_of_loaded_module(bare_interp):
    text = bare_interp.eval("(explain-import 'sys)")
    assert "sys.modules" in text
