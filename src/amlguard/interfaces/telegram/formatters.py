import html
from typing import List, Optional, Union

from amlguard.domain.entities import AMLResult, TransactionResult
from amlguard.interfaces.telegram.translations import TranslationStore


def format_check_result(
    store: TranslationStore,
    lang: Optional[str],
    result: Union[AMLResult, TransactionResult],
) -> str:
    if isinstance(result, TransactionResult):
        header = store.get(lang, "result_transaction", target=html.escape(result.transaction_id))
    else:
        header = store.get(lang, "result_address", target=html.escape(result.address))

    verdict = store.get(lang, "result_suspicious" if result.is_suspicious else "result_clean")
    lines = [
        header,
        verdict,
        store.get(lang, "risk_score", score=result.risk_score),
        store.get(lang, "details_header"),
    ]
    lines.extend(_detail_lines(store, lang, result.details))
    return "\n".join(lines)


def format_check_error(store: TranslationStore, lang: Optional[str], target: str, error: Exception) -> str:
    return store.get(
        lang,
        "error_checking",
        target=html.escape(target),
        error=html.escape(str(error) or error.__class__.__name__),
    )


def _detail_lines(store: TranslationStore, lang: Optional[str], details: List[str]) -> List[str]:
    present = [d.strip() for d in details if d and d.strip()]
    if not present:
        return [store.get(lang, "no_details")]
    return [store.get(lang, "detail_line", detail=html.escape(d)) for d in present]
