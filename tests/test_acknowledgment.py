"""Tests for proof token annotation."""

from grocy_mcp.registry import AcknowledgmentAnnotator, annotate_result
from grocy_mcp.utils.response import error_response, result_texts, success_response


def test_token_appended_to_success():
    result = success_response({"id": 1}, "Done")

    annotated = annotate_result(result, "ALPHA_TOKEN")

    assert result_texts(annotated)[:-1] == result_texts(result)
    assert result_texts(annotated)[-1] == "ALPHA_TOKEN"
    assert len(annotated.content) == len(result.content) + 1


def test_original_result_not_mutated():
    result = success_response({"id": 1})
    before = result_texts(result)

    annotate_result(result, "ALPHA_TOKEN")

    assert result_texts(result) == before


def test_no_token_leaves_result_unchanged():
    result = success_response({"id": 1})

    assert annotate_result(result, None) is result
    assert annotate_result(result, "") is result


def test_error_results_never_annotated():
    result = error_response("failed")

    annotated = annotate_result(result, "ALPHA_TOKEN")

    assert annotated is result
    assert "ALPHA_TOKEN" not in result_texts(annotated)


def test_annotator_from_config(make_config):
    config = make_config(
        """
operations:
  inventory_transactions_purchase:
    enabled: true
    proof_token: ALPHA_TOKEN
  inventory_stock_get_all:
    enabled: true
  shopping_list_get:
    enabled: false
    proof_token: DISABLED_TOKEN
"""
    )
    annotator = AcknowledgmentAnnotator.from_config(config)

    assert annotator.has_token("inventory_transactions_purchase")
    assert not annotator.has_token("inventory_stock_get_all")
    assert not annotator.has_token("shopping_list_get")

    purchased = annotator.annotate("inventory_transactions_purchase", success_response({}))
    assert result_texts(purchased)[-1] == "ALPHA_TOKEN"

    stock = success_response([])
    assert annotator.annotate("inventory_stock_get_all", stock) is stock
