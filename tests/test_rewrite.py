import pytest

from docserve.rewrite import RewriteError, rewrite_page

HEAD = "<!--HEAD-->"
VENDORED = "<!--VENDORED-->"
BODY = "<!--BODY-->"
TOPBAR = "<!--TOPBAR-->"

PAGE = (
    "<!DOCTYPE html><html><head><title>doc</title>"
    '<link rel="stylesheet" type="text/css" href="../rustdoc.css">'
    "</head><body class=\"rustdoc\"><p>content</p></body></html>"
)


def rewrite(page, limit=1 << 20):
    return rewrite_page(page, HEAD, VENDORED, BODY, TOPBAR, limit).decode()


def test_head_content_appended_before_head_end():
    out = rewrite(PAGE)
    assert HEAD + "</head>" in out
    assert out.index("<title>doc</title>") < out.index(HEAD)


def test_vendored_css_before_rustdoc_link():
    out = rewrite(PAGE)
    assert VENDORED + '<link rel="stylesheet" type="text/css" href="../rustdoc.css">' in out


def test_other_links_untouched():
    page = '<html><head><link type="text/css" href="style.css"></head><body></body></html>'
    out = rewrite(page)
    assert VENDORED not in out
    assert '<link type="text/css" href="style.css">' in out


def test_body_wrapped_in_div():
    out = rewrite(PAGE)
    start = out.index('<body class="rustdoc-page">')
    topbar = out.index(TOPBAR)
    wrapper = out.index('id="rustdoc_body_wrapper"')
    body = out.index(BODY)
    content = out.index("<p>content</p>")
    assert start < topbar < wrapper < body < content
    assert 'class="rustdoc container-rustdoc"' in out
    assert 'tabindex="-1"' in out
    assert out.endswith("<p>content</p></div></body></html>")


def test_body_without_class_gets_container_class():
    out = rewrite("<html><head></head><body><p>x</p></body></html>")
    assert 'class="container-rustdoc"' in out
    assert out.count("<body") == 1
    assert out.count("</body>") == 1


def test_text_passed_through():
    out = rewrite(PAGE)
    assert "<!DOCTYPE html>" in out
    assert out.count("<p>content</p>") == 1


def test_script_content_not_rewritten():
    page = "<html><head></head><body><script>var s = '<body>';</script></body></html>"
    out = rewrite(page)
    assert "var s = '<body>';" in out
    assert out.count('id="rustdoc_body_wrapper"') == 1


def test_accepts_bytes_and_str_alike():
    assert rewrite_page(PAGE.encode(), HEAD, VENDORED, BODY, TOPBAR, 1 << 20) == rewrite_page(
        PAGE, HEAD, VENDORED, BODY, TOPBAR, 1 << 20
    )


def test_oversized_tag_raises():
    page = "<html><head></head><body><div data-x=\"" + "a" * 500 + "\"></div></body></html>"
    with pytest.raises(RewriteError):
        rewrite(page, limit=100)


def test_long_text_within_limit():
    page = "<html><head></head><body>" + "a" * 500 + "</body></html>"
    out = rewrite(page, limit=100)
    assert "a" * 500 in out


def test_invalid_utf8_preserved():
    page = b"<html><head></head><body>\xff</body></html>"
    out = rewrite_page(page, HEAD, VENDORED, BODY, TOPBAR, 1 << 20)
    assert b"\xff</div></body>" in out