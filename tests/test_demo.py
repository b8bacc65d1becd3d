import pytest

from excatch import demo, runtime
from excatch.blocks import what

TITLES = [
    "FIRST TEST",
    "SECOND TEST",
    "THIRD TEST",
    "FOURTH TEST",
    "FIFTH TEST",
    "SIXTH TEST",
    "SEVENTH TEST",
    "EIGHTH TEST",
    "NINTH TEST",
    "TENTH TEST",
]


@pytest.fixture(autouse=True)
def fresh_runtime():
    runtime._reset()
    yield
    runtime._reset()


@pytest.fixture
def output(capsys):
    status = demo.main([])
    return status, capsys.readouterr().err


def section(err, title):
    lines = err.splitlines()
    start = lines.index(title)
    position = TITLES.index(title)
    if position + 1 < len(TITLES):
        end = lines.index(TITLES[position + 1])
    else:
        end = len(lines)
    return lines[start + 2 : end]


def test_main_returns_zero(output):
    status, _ = output
    assert status == 0


def test_sections_appear_in_order(output):
    _, err = output
    lines = err.splitlines()
    positions = [lines.index(title) for title in TITLES]
    assert positions == sorted(positions)


def test_unreachable_lines_are_never_printed(output):
    _, err = output
    assert "unreachable" not in err


def test_basic_catch(output):
    _, err = output
    lines = [line for line in section(err, "FIRST TEST") if line]
    assert lines == ["TRY", "CATCH(1)"]


def test_throw_from_function(output):
    _, err = output
    lines = [line for line in section(err, "SECOND TEST") if line]
    assert lines == ["TRY", "second_test_func", "first_test_func", "CATCH(3)"]


def test_third_section_catches_two(output):
    _, err = output
    lines = [line for line in section(err, "THIRD TEST") if line]
    assert lines == ["TRY", "CATCH(2)"]


def test_rethrow_reaches_outer_block(output):
    _, err = output
    lines = [line for line in section(err, "FOURTH TEST") if line]
    assert lines == ["TRY (outer)", "TRY (inner)", "CATCH(2) (inner)", "CATCH(2) (outer)"]


def test_rethrow_across_functions(output):
    _, err = output
    lines = [line for line in section(err, "FIFTH TEST") if line]
    assert lines == [
        "TRY",
        "third_test_func",
        "TRY (third_test_func)",
        "first_test_func",
        "CATCH(3) (third_test_func)",
        "CATCH(3)",
    ]


def test_synchronized_changes(output):
    _, err = output
    lines = section(err, "SIXTH TEST")
    assert "i (before TRY) = 0" in lines
    assert "j (before TRY) = 0" in lines
    assert "i (in CATCH) = 1" in lines
    assert "j (in CATCH) = 1" in lines
    assert "i (after TRY) = 1" in lines
    assert "j (after TRY) = 1" in lines


def test_named_catch_all_gets_code(output):
    _, err = output
    lines = [line for line in section(err, "SEVENTH TEST") if line]
    assert lines == ["TRY", "CATCH(e)", "e = 4"]


def test_unnamed_catch_all(output):
    _, err = output
    lines = [line for line in section(err, "EIGHTH TEST") if line]
    assert lines == ["TRY", "CATCH() something"]


def test_no_catch_drops_exception(output):
    _, err = output
    lines = [line for line in section(err, "NINTH TEST") if line]
    assert lines == ["TRY"]


def test_what_message_is_printed(output):
    _, err = output
    lines = [line for line in section(err, "TENTH TEST") if line]
    assert lines == [
        "TRY",
        "CATCH(EXCEPTION_FOO) where EXCEPTION_FOO = 1",
        'what = this is a "what" message',
    ]


def test_state_after_main(output):
    assert runtime.stack_depth() == 0
    assert runtime.last_exception() == demo.EXCEPTION_FOO
    assert what() == 'this is a "what" message'


def test_main_is_repeatable(capsys):
    demo.main()
    first = capsys.readouterr().err
    demo.main()
    second = capsys.readouterr().err
    assert first == second
    assert runtime.stack_depth() == 0