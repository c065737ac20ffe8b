import json
from types import SimpleNamespace

from app.chat.prompt import PromptBuilder
from app.models.catalog import CatalogSnapshot, Pagination
from app.services.chat_service import ChatService


def _snapshot():
    return CatalogSnapshot(
        pagination=Pagination(current_page=1, total_pages=0, total_items=0, page_size=10),
        total_products=0,
    )


def _raise(error):
    def fail():
        raise error
    return fail


def test_stream_chat_relays_backend_output(fake_llm, fake_stream, line):
    stream = fake_stream([line("Sams"), line("ung Galaxy"), line("."), line("", done=True)])
    llm = fake_llm(stream=stream)
    svc = ChatService(
        snapshot_builder=SimpleNamespace(build=_snapshot),
        prompt_builder=PromptBuilder(),
        llm_client=llm,
    )

    events = list(svc.stream_chat("Do you sell phones?"))

    assert [(e.event, e.data) for e in events] == [("message", "Samsung Galaxy.")]
    assert len(llm.prompts) == 1
    assert llm.prompts[0].endswith("User question: Do you sell phones?")
    assert stream.closed


def test_catalog_failure_yields_single_error(fake_llm, backend_errors):
    llm = fake_llm()
    svc = ChatService(
        snapshot_builder=SimpleNamespace(build=_raise(backend_errors["catalog"])),
        prompt_builder=PromptBuilder(),
        llm_client=llm,
    )

    events = list(svc.stream_chat("Hi"))

    assert [e.event for e in events] == ["error"]
    assert "database is down" in json.loads(events[0].data)["error"]
    assert llm.prompts == []


def test_backend_open_failure_yields_single_error(fake_llm, backend_errors):
    llm = fake_llm(open_error=backend_errors["connect"])
    svc = ChatService(
        snapshot_builder=SimpleNamespace(build=_snapshot),
        prompt_builder=PromptBuilder(),
        llm_client=llm,
    )

    events = list(svc.stream_chat("Hi"))

    assert len(events) == 1
    assert events[0].event == "error"
    assert json.loads(events[0].data) == {"error": "Failed to connect to generation backend: refused"}
    assert len(llm.prompts) == 1


def test_cancelled_request_never_opens_backend(fake_llm, fake_stream, line):
    stream = fake_stream([line("Hello.")])
    llm = fake_llm(stream=stream)
    svc = ChatService(
        snapshot_builder=SimpleNamespace(build=_snapshot),
        prompt_builder=PromptBuilder(),
        llm_client=llm,
    )

    events = list(svc.stream_chat("Hi", is_cancelled=lambda: True))

    assert events == []
    assert llm.prompts == []
    assert stream.reads == 0


def test_cancel_after_open_closes_stream(fake_llm, fake_stream, line):
    stream = fake_stream([line("Hello.")])
    checks = iter([False, True])
    svc = ChatService(
        snapshot_builder=SimpleNamespace(build=_snapshot),
        prompt_builder=PromptBuilder(),
        llm_client=fake_llm(stream=stream),
    )

    events = list(svc.stream_chat("Hi", is_cancelled=lambda: next(checks)))

    assert events == []
    assert stream.reads == 0
    assert stream.closed
