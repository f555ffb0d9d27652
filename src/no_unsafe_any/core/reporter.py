from collections.abc import Mapping

from no_unsafe_any.errors import ReportContractError
from no_unsafe_any.messages import REQUIRED_DATA, MessageId, render_message
from no_unsafe_any.models import Diagnostic, SyntaxNode


class DiagnosticReporter:
    """Collects diagnostics in emission order. The engine's only output channel."""

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return list(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)

    def report(
        self,
        node: SyntaxNode,
        message_id: MessageId | str,
        data: Mapping[str, str] | None = None,
    ) -> Diagnostic:
        try:
            resolved_id = MessageId(message_id)
        except ValueError:
            raise ReportContractError(f"Unknown message id '{message_id}'") from None

        payload = {key: str(value) for key, value in (data or {}).items()}
        required = REQUIRED_DATA[resolved_id]
        missing = sorted(key for key in required if not payload.get(key))
        if missing:
            raise ReportContractError(f"{resolved_id.value} requires data {missing}")
        unexpected = sorted(set(payload) - required)
        if unexpected:
            raise ReportContractError(f"{resolved_id.value} does not accept data {unexpected}")

        diagnostic = Diagnostic(
            message_id=resolved_id,
            message=render_message(resolved_id, payload),
            data=payload,
            node_type=node.type,
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            start_point=node.start_point,
            end_point=node.end_point,
            anchor=node,
        )
        self._diagnostics.append(diagnostic)
        return diagnostic
