import pytest

from conftest import pdf
from gradeportal_core.models import SelectedFile
from gradeportal_core.notifications import NotificationCenter
from gradeportal_core.presenter import FileInfoPresenter
from gradeportal_core.view import ViewContext


@pytest.fixture
def view():
    return ViewContext()


def test_labels_for_selected_files(view):
    view.question_input.files = [SelectedFile(name="q.txt", media_type="text/plain", size=2048)]
    view.student_input.files = [pdf("a.pdf", 1024), pdf("b.pdf", 512)]

    FileInfoPresenter(view).refresh()

    assert view.question_input.info == "q.txt (2 KB)"
    assert view.student_input.info == "2 files selected (1.5 KB total)"
    assert view.submit_enabled


def test_submit_needs_both_inputs(view):
    presenter = FileInfoPresenter(view)
    view.question_input.files = [pdf("q.pdf")]
    presenter.refresh()
    assert not view.submit_enabled
    assert view.student_input.info is None

    view.student_input.files = [pdf()]
    presenter.refresh()
    assert view.submit_enabled


def test_presence_gate_ignores_type_errors(view):
    # The button enables; validation at submit time still blocks
    view.question_input.files = [SelectedFile(name="q.png", media_type="image/png", size=10)]
    view.student_input.files = [SelectedFile(name="a.doc", media_type="application/msword", size=10)]
    FileInfoPresenter(view).refresh()
    assert view.submit_enabled


def test_clearing_selection_removes_label(view):
    presenter = FileInfoPresenter(view)
    view.question_input.files = [pdf("q.pdf")]
    presenter.refresh()
    view.question_input.files = []
    presenter.refresh()
    assert view.question_input.info is None
    assert not view.submit_enabled


def test_stays_disabled_while_loading(view):
    view.question_input.files = [pdf("q.pdf")]
    view.student_input.files = [pdf()]
    view.loading_visible = True
    FileInfoPresenter(view).refresh()
    assert not view.submit_enabled


def test_notifications_are_single_slot(view):
    center = NotificationCenter(view)
    center.error("first")
    center.success("second")
    assert view.notification.message == "second"
    assert view.notification.css_class == "alert-success"

    center.dismiss()
    assert center.current is None


def test_unknown_notification_kind(view):
    with pytest.raises(ValueError):
        NotificationCenter(view).notify("hello", "info")
