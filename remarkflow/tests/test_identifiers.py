"""Variable names may use CJK ideographs alongside ASCII letters."""

from remarkflow import parse, parse_for_display
from remarkflow.models import ButtonsOnly, NonAssignmentButtons, TextOnly


def test_pure_chinese_variable_name():
    props = parse_for_display("?[%{{颜色}} 红色 | 蓝色 | 绿色]")
    assert props.variable_name == "颜色"
    assert props.button_texts == ("红色", "蓝色", "绿色")
    assert props.button_values == ("红色", "蓝色", "绿色")


def test_mixed_chinese_and_english_name():
    result = parse("?[%{{主题theme}} light | dark]")
    assert isinstance(result, ButtonsOnly)
    assert result.variable == "主题theme"


def test_chinese_name_with_digits_and_underscore():
    assert parse("?[%{{配置_1}} option1 | option2]").variable == "配置_1"


def test_chinese_name_with_placeholder():
    assert parse("?[%{{用户名}}...请输入您的姓名]") == TextOnly(
        variable="用户名", question="请输入您的姓名"
    )


def test_underscore_first():
    assert parse("?[%{{_私有变量}} yes | no]").variable == "_私有变量"


def test_digit_first_is_not_a_variable():
    result = parse("?[%{{1变量}} option]")
    assert isinstance(result, NonAssignmentButtons)
    props = parse_for_display("?[%{{1变量}} option]")
    assert props.variable_name is None
    assert props.button_texts == ("%{{1变量}} option",)


def test_other_scripts_are_not_identifiers():
    """Only ASCII letters and CJK unified ideographs start a name."""
    assert isinstance(parse("?[%{{café}} a | b]"), NonAssignmentButtons)
    assert isinstance(parse("?[%{{имя}}...?]"), NonAssignmentButtons)
