from datetime import date

import pytest

from docserve.rustc_version import (
    get_correct_docsrs_style_file,
    parse_rustc_date,
    parse_rustc_version,
)


def test_parse_rustc_version():
    assert (
        parse_rustc_version("rustc 1.10.0-nightly (57ef01513 2016-05-23)")
        == "20160523-1.10.0-nightly-57ef01513"
    )
    assert (
        parse_rustc_version("docsrs 0.2.0 (ba9ae23 2016-05-26)")
        == "20160526-0.2.0-ba9ae23"
    )


def test_parse_rustc_version_rejects_garbage():
    with pytest.raises(ValueError):
        parse_rustc_version("docsrs 0.2.0")


def test_parse_rustc_date():
    assert parse_rustc_date("rustc 1.10.0-nightly (57ef01513 2016-05-23)") == date(
        2016, 5, 23
    )


def test_parse_rustc_date_requires_trailing_paren():
    with pytest.raises(ValueError):
        parse_rustc_date("rustc 1.10.0 (57ef01513 2016-05-23) extra")


def test_get_correct_docsrs_style_file():
    assert (
        get_correct_docsrs_style_file("rustc 1.10.0-nightly (57ef01513 2016-05-23)")
        == "rustdoc.css"
    )
    assert (
        get_correct_docsrs_style_file("docsrs 0.2.0 (ba9ae23 2022-05-26)")
        == "rustdoc-2021-12-05.css"
    )
    with pytest.raises(ValueError):
        get_correct_docsrs_style_file("docsrs 0.2.0")


def test_layout_switch_date_itself_is_old_style():
    assert (
        get_correct_docsrs_style_file("rustc 1.59.0 (abcdef0 2021-12-05)")
        == "rustdoc.css"
    )