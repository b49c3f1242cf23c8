"""Qt bridge to run advisor requests in a worker thread."""

from __future__ import annotations

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from chesslink.advisor.base import AdvisorRequest, MoveAdvisor
from chesslink.advisor.runner import consult


class AdvisorWorker(QObject):
    """Thread-affine worker that consults the advisor on demand."""

    reply_ready = pyqtSignal(int, object)
    consult_failed = pyqtSignal(int, str)

    @pyqtSlot(object, object)
    def consult(self, advisor_obj: object, request_obj: object) -> None:
        """Ask *advisor_obj* about *request_obj* and emit the outcome."""
        if not isinstance(request_obj, AdvisorRequest):
            self.consult_failed.emit(-1, "Advisor received invalid request")
            return
        if not isinstance(advisor_obj, MoveAdvisor):
            self.consult_failed.emit(request_obj.request_id, "Invalid advisor")
            return

        reply, error = consult(advisor_obj, request_obj)
        if reply is None:
            self.consult_failed.emit(request_obj.request_id, error or "no reply")
            return
        self.reply_ready.emit(request_obj.request_id, reply)
