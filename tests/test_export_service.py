import asyncio
import json

import pytest

from faceless_timeline.config import settings
from faceless_timeline.errors import ConfigurationError
from faceless_timeline.models import Project
from faceless_timeline.services import TimelineExportService


@pytest.fixture()
def short_project(segment_factory):
    return Project(
        id="short-1",
        segments=[
            segment_factory(0, 1.0, [("Hello", 0.0, 0.5), ("there", 0.5, 0.9)], effect="blur"),
            segment_factory(1, 0.5, text="Bye"),
        ],
    )


def _collect(project, output_path, fps):
    async def run():
        return [event async for event in TimelineExportService.export_render_plan(project, output_path, fps)]

    return asyncio.run(run())


def test_iter_frames_covers_every_frame_in_order(short_project):
    descriptors = list(TimelineExportService.iter_frames(short_project, fps=10))

    assert [d.frame for d in descriptors] == list(range(15))
    assert [d.segment_id for d in descriptors[9:11]] == ["seg0", "seg1"]
    assert descriptors[-1].display_text == "Bye"


def test_write_render_plan(short_project, tmp_path):
    output = tmp_path / "plans" / "short.jsonl"
    frames = TimelineExportService.write_render_plan(short_project, output, fps=10)

    lines = output.read_text(encoding="utf-8").splitlines()
    assert frames == 15
    assert len(lines) == 16

    header = json.loads(lines[0])
    assert header["type"] == "header"
    assert header["projectId"] == "short-1"
    assert header["totalFrames"] == 15
    assert header["format"] == {"width": 1080, "height": 1920}
    assert header["captionStyle"]["wordsPerBatch"] == 3
    assert [s["startFrame"] for s in header["segments"]] == [0, 10]

    first = json.loads(lines[1])
    assert first["frame"] == 0
    assert first["effectTransform"]["blurPx"] == 5.0


def test_plan_lines_are_deterministic(short_project):
    first = list(TimelineExportService.iter_plan_lines(short_project, fps=10))
    second = list(TimelineExportService.iter_plan_lines(short_project, fps=10))
    assert first == second


def test_export_streams_progress(short_project, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "export_progress_interval", 4)
    output = tmp_path / "short.jsonl"

    events = _collect(short_project, output, 10)

    assert [e.status for e in events] == ["starting", "rendering", "rendering", "rendering", "rendering", "complete"]
    assert [e.frames_rendered for e in events[1:5]] == [4, 8, 12, 15]
    assert events[-1].progress == 1.0
    assert events[-1].output_file == "short.jsonl"
    assert output.read_text(encoding="utf-8").splitlines()[1:] == [
        line.rstrip("\n") for line in list(TimelineExportService.iter_plan_lines(short_project, fps=10))[1:]
    ]


def test_export_reports_unresolved_duration(segment_factory, tmp_path):
    project = Project(id="broken", segments=[segment_factory(0, None, text="x")])
    events = _collect(project, tmp_path / "broken.jsonl", 30)

    assert [e.status for e in events] == ["starting", "error"]
    assert "duration" in events[-1].error


def test_default_output_path(short_project, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "output_dir", tmp_path)
    assert TimelineExportService.default_output_path(short_project) == tmp_path / "short-1.jsonl"


@pytest.mark.parametrize("project_id", ["../escape", "", "a/b", "name.jsonl"])
def test_default_output_path_rejects_unsafe_ids(project_id):
    with pytest.raises(ConfigurationError):
        TimelineExportService.default_output_path(Project(id=project_id))


def test_successful_export_leaves_no_partial_file(short_project, tmp_path):
    output = tmp_path / "short.jsonl"
    _collect(short_project, output, 10)

    assert output.exists()
    assert not TimelineExportService.partial_path(output).exists()


def test_failed_export_removes_partial_output(short_project, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "export_progress_interval", 4)
    calls = []

    def render_then_fail(compositor, project, timeline, start, end):
        calls.append(start)
        if start >= 8:
            raise RuntimeError("encoder crashed")
        return [f"{frame}\n" for frame in range(start, end)]

    monkeypatch.setattr(TimelineExportService, "_render_chunk", staticmethod(render_then_fail))
    output = tmp_path / "short.jsonl"

    events = _collect(short_project, output, 10)

    assert [e.status for e in events] == ["starting", "rendering", "rendering", "error"]
    assert events[-1].error == "encoder crashed"
    assert calls == [0, 4, 8]
    assert not output.exists()
    assert not TimelineExportService.partial_path(output).exists()
