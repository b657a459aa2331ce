# tests/core/test_model.py
import pytest
from pydantic import ValidationError

from idx_wrapper.model import FetchResult, TargetKind, WrapFailure, WrapRequest


def test_flags_are_only_set_by_y():
    """Alleen 'y' zet een vlag aan."""
    request = WrapRequest.model_validate({
        "site": "http://example.com", "h1Ignore": "y", "removeConflicts": "n", "removeScripts": "yes"
    })
    assert request.h1_ignore is True
    assert request.remove_conflicts is False
    assert request.remove_scripts is False


def test_missing_title_becomes_empty():
    assert WrapRequest.model_validate({"site": "http://example.com"}).title == ""


def test_site_is_required():
    with pytest.raises(ValidationError):
        WrapRequest.model_validate({"target": "id", "id": "content"})


@pytest.mark.parametrize("params, kind, value", [
    ({"target": "id", "id": "content"}, TargetKind.ID, "content"),
    ({"target": "element", "el": "main"}, TargetKind.ELEMENT, "main"),
    ({"target": "class", "class": "wrapper"}, TargetKind.CLASS, "wrapper"),
    ({"target": "selector", "targetValue": "div%20.x"}, TargetKind.SELECTOR, "div%20.x"),
    ({"target": "id"}, TargetKind.ID, ""),
])
def test_target_spec(params, kind, value):
    """Elk target-type leest zijn eigen parameter."""
    spec = WrapRequest.model_validate({"site": "http://example.com", **params}).target_spec()
    assert spec.kind is kind
    assert spec.value == value


@pytest.mark.parametrize("target", [None, "", "xpath"])
def test_unknown_target_kind_has_no_spec(target):
    request = WrapRequest.model_validate({"site": "http://example.com", "target": target})
    assert request.target_spec() is None


@pytest.mark.parametrize("status, error, success", [
    (200, None, True),
    (204, None, True),
    (301, None, False),
    (404, None, False),
    (-1, "Cannot connect", False),
])
def test_fetch_result_success(status, error, success):
    assert FetchResult(url="http://example.com", status_code=status, error=error).success is success


def test_wrap_failure_shape():
    failure = WrapFailure(site_requested="http://example.com/")
    assert failure.to_dict() == {
        "error": "Did not recieve a 200 http code",
        "siteRequested": "http://example.com/",
    }
