"""Unit tests for attribute value handlers.

Handlers are exercised directly with a URLValidator, independent of any tag
catalog; decision-order behavior is covered in test_policy.py.
"""

import pytest

from xsspolicy.errors import PolicyErrorCode, ValidationError
from xsspolicy.handlers import (
    URL_ATTRIBUTES,
    ArchiveHandler,
    ExtensionHandler,
    HandlerRegistry,
    MetaContentURLHandler,
    SingleURLHandler,
    SrcsetHandler,
    as_handler,
)
from xsspolicy.protocols import ProtocolAllowlist
from xsspolicy.urls import URLValidator


@pytest.fixture
def urls() -> URLValidator:
    return URLValidator(ProtocolAllowlist(["https:"]))


class TestSrcsetHandler:
    @pytest.mark.parametrize(
        "value",
        [
            "https://a.c 2x",
            "https://a.c, https://b.c 2x",
            "https://a.c 1x, https://b.c 2x",
            "  https://a.c 480w,\n https://b.c\t800w  ",
        ],
    )
    def test_accepts_safe_candidates(self, urls, value):
        SrcsetHandler().validate("img", "srcset", value, urls)

    def test_missing_value(self, urls):
        with pytest.raises(ValidationError) as exc_info:
            SrcsetHandler().validate("img", "srcset", None, urls)
        assert exc_info.value.code == PolicyErrorCode.E_DANGEROUS_ATTRIBUTE_MISSING_VALUE

    def test_single_bad_candidate(self, urls):
        with pytest.raises(
            ValidationError, match="not allowing img.srcset: invalid protocol javascript:"
        ):
            SrcsetHandler().validate("img", "srcset", "javascript:alert(1)", urls)

    def test_bad_second_candidate(self, urls):
        with pytest.raises(ValidationError, match="invalid protocol javascript:"):
            SrcsetHandler().validate("img", "srcset", "https://a.c,javascript:alert(1) 2x", urls)

    def test_insecure_candidate(self, urls):
        with pytest.raises(ValidationError) as exc_info:
            SrcsetHandler().validate("img", "srcset", "https://a.c 1x, http://b.c 2x", urls)
        assert exc_info.value.code == PolicyErrorCode.E_UNENCRYPTED_HTTP


class TestMetaContentURLHandler:
    def test_ignores_other_tags(self, urls):
        MetaContentURLHandler().validate("div", "content", "0; url=javascript:alert(1)", urls)
        MetaContentURLHandler().validate("div", "content", None, urls)

    def test_no_url_part(self, urls):
        MetaContentURLHandler().validate("meta", "content", "1000", urls)

    def test_safe_refresh(self, urls):
        MetaContentURLHandler().validate("meta", "content", "1000; url=https://a.c", urls)

    def test_unsafe_refresh(self, urls):
        with pytest.raises(
            ValidationError, match="not allowing meta.content: invalid protocol javascript:"
        ):
            MetaContentURLHandler().validate(
                "meta", "content", "1000; url=javascript:alert(1)", urls
            )

    def test_only_first_url_part_checked(self, urls):
        """The portion between the first and second marker is the target."""
        MetaContentURLHandler().validate("meta", "content", "0; url=https://a.c/?next=url=x", urls)

    def test_missing_value(self, urls):
        with pytest.raises(ValidationError, match="no value given for dangerous URL attribute"):
            MetaContentURLHandler().validate("meta", "content", None, urls)


class TestArchiveHandler:
    def test_object_uses_commas(self, urls):
        ArchiveHandler().validate("object", "archive", "https://a.c,  https://b.c", urls)

    def test_applet_uses_spaces(self, urls):
        ArchiveHandler().validate("applet", "archive", "https://a.c  https://b.c", urls)

    def test_other_tags_not_checked(self, urls):
        ArchiveHandler().validate("div", "archive", "xyzzy", urls)
        ArchiveHandler().validate("div", "archive", None, urls)

    @pytest.mark.parametrize(
        "tag,value",
        [
            ("object", "javascript:alert(1)"),
            ("object", "https://a.c,javascript:alert(1)"),
            ("applet", "javascript:alert(1)"),
            ("applet", "https://a.c javascript:alert(1)"),
        ],
    )
    def test_unsafe_segment(self, urls, tag, value):
        with pytest.raises(
            ValidationError, match=f"not allowing {tag}.archive: invalid protocol javascript:"
        ):
            ArchiveHandler().validate(tag, "archive", value, urls)

    @pytest.mark.parametrize("tag", ["object", "applet"])
    def test_missing_value(self, urls, tag):
        with pytest.raises(ValidationError, match="no value given for dangerous URL attribute"):
            ArchiveHandler().validate(tag, "archive", None, urls)

    def test_custom_separators(self, urls):
        handler = ArchiveHandler(separators={"embed": ";"})
        handler.validate("object", "archive", "javascript:alert(1)", urls)
        with pytest.raises(ValidationError):
            handler.validate("embed", "archive", "https://a.c;javascript:alert(1)", urls)


class TestExtensionHandler:
    def test_validation_error_propagates_unchanged(self, urls):
        def reject(tag, attribute, value):
            raise ValidationError(tag, attribute, "bad value: " + str(value))

        with pytest.raises(ValidationError) as exc_info:
            ExtensionHandler(reject).validate("div", "data-foo", "x", urls)
        assert str(exc_info.value) == "not allowing div.data-foo: bad value: x"

    def test_other_exceptions_wrapped(self, urls):
        def reject(tag, attribute, value):
            raise ValueError("too long")

        with pytest.raises(ValidationError) as exc_info:
            ExtensionHandler(reject).validate("div", "title", "x" * 10, urls)
        err = exc_info.value
        assert err.code == PolicyErrorCode.E_HANDLER_REJECTED
        assert err.message == "too long"
        assert isinstance(err.cause, ValueError)

    def test_returning_normally_passes(self, urls):
        calls = []
        ExtensionHandler(lambda *args: calls.append(args)).validate("div", "title", "x", urls)
        assert calls == [("div", "title", "x")]

    def test_as_handler_wraps_callables(self):
        def check(tag, attribute, value):
            pass

        assert as_handler(check) == ExtensionHandler(check)
        built_in = SrcsetHandler()
        assert as_handler(built_in) is built_in

    def test_as_handler_rejects_non_callables(self):
        with pytest.raises(TypeError):
            as_handler("not a handler")


class TestHandlerRegistry:
    def test_default_registry_covers_url_attributes(self):
        registry = HandlerRegistry.default()
        for attribute in URL_ATTRIBUTES:
            assert registry.get(attribute) == SingleURLHandler()
        assert registry.get("content") == MetaContentURLHandler()
        assert registry.get("srcset") == SrcsetHandler()
        assert registry.get("archive") == ArchiveHandler()
        assert registry.get("title") is None

    def test_register_returns_replaced_handler(self):
        registry = HandlerRegistry.default()
        previous = registry.register("href", lambda tag, attribute, value: None)
        assert previous == SingleURLHandler()
        assert isinstance(registry.get("href"), ExtensionHandler)
        assert registry.register("data-new", SrcsetHandler()) is None

    def test_dispatch_without_handler_is_noop(self, urls):
        HandlerRegistry().dispatch("a", "href", "javascript:alert(1)", urls)

    def test_dispatch_runs_handler(self, urls):
        with pytest.raises(ValidationError):
            HandlerRegistry.default().dispatch("a", "href", "javascript:alert(1)", urls)

    def test_copy_is_independent(self):
        original = HandlerRegistry.default()
        clone = original.copy()
        clone.register("title", SingleURLHandler())
        assert "title" in clone
        assert "title" not in original
