from __future__ import annotations

import numpy as np
import pytest

import kenburns.antialias
from kenburns import (
    ConfigurationError, KenBurnsSequence, Rect, RenderState, SamplingError, SinkError
)
from rendering import FrameCollector

from conftest import RecordingSink, quiet_config


def _small_config(**kwargs):
    params = dict(duration=2, frame_rate=25, frame_size=(12, 16))
    params.update(kwargs)
    return quiet_config(**params)


def test_render_writes_every_frame_in_order(rgb_canvas: np.ndarray) -> None:
    seq = KenBurnsSequence(rgb_canvas, _small_config())
    sink = FrameCollector(seq.frame_shape)

    written = seq.render(sink)

    assert written == 50
    assert len(sink.frames) == 50
    assert all(frame.shape == (12, 16, 3) for frame in sink.frames)
    assert sink.closed and not sink.aborted
    assert seq.state is RenderState.DONE


def test_render_reports_progress(rgb_canvas: np.ndarray, capsys: pytest.CaptureFixture[str]) -> None:
    seq = KenBurnsSequence(rgb_canvas, _small_config())
    seq.render(FrameCollector(seq.frame_shape))

    out = capsys.readouterr().out
    assert "Total frames: 50" in out
    assert "done." in out


def test_default_rects_are_derived_from_the_canvas(rgb_canvas: np.ndarray) -> None:
    seq = KenBurnsSequence(rgb_canvas, _small_config())

    assert seq.config.start_rect.to_tuple() == pytest.approx((1.0, 1.0, 1.0))
    assert seq.config.end_rect.to_tuple() == pytest.approx((16.0, 12.0, 0.5))


def test_single_channel_canvas_is_squeezed() -> None:
    seq = KenBurnsSequence(np.zeros((20, 30, 1), dtype=np.uint8), _small_config())

    assert seq.canvas.shape == (20, 30)
    assert seq.channels == 1
    assert seq.frame_shape == (12, 16)


@pytest.mark.parametrize("canvas", [np.zeros((4, 4, 2)), np.zeros((0, 4)), [[0, 1], [1, 0]]])
def test_invalid_canvas_is_rejected(canvas) -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        KenBurnsSequence(canvas)
    assert exc_info.value.field == 'canvas'


def test_identity_schedule_reproduces_the_canvas(gradient_canvas: np.ndarray) -> None:
    config = quiet_config(
        duration=0.2, frame_rate=25, frame_size=(48, 64),
        start_rect=Rect(1, 1, 1), end_rect=Rect(1, 1, 1),
    )
    seq = KenBurnsSequence(gradient_canvas, config)

    frames = list(seq.frames())

    assert len(frames) == 5
    for frame in frames:
        np.testing.assert_allclose(frame, gradient_canvas, atol=1e-6)


def test_rendering_is_deterministic(rgb_canvas: np.ndarray) -> None:
    config = _small_config(antialias=True)
    seq = KenBurnsSequence(rgb_canvas, config)

    first = FrameCollector(seq.frame_shape)
    second = FrameCollector(seq.frame_shape)
    seq.render(first)
    seq.render(second)
    streamed = list(seq.frames())

    for a, b, c in zip(first.frames, second.frames, streamed):
        np.testing.assert_array_equal(a, b)
        np.testing.assert_array_equal(a, c)


def test_invalid_rect_fails_before_the_sink_is_touched(rgb_canvas: np.ndarray) -> None:
    seq = KenBurnsSequence(rgb_canvas, _small_config(end_rect=(0, 1, 1)))
    sink = RecordingSink(seq.frame_shape)

    with pytest.raises(ConfigurationError) as exc_info:
        seq.render(sink)

    assert exc_info.value.field == 'end_rect.x'
    assert sink.calls == []
    assert seq.state is RenderState.FAILED


@pytest.mark.parametrize(
    "overrides,field",
    [
        ({'duration': 0}, 'duration'),
        ({'duration': 0.01}, 'duration'),
        ({'frame_rate': -25}, 'frame_rate'),
        ({'frame_size': (0, 16)}, 'frame_size'),
        ({'frame_size': (12.5, 16)}, 'frame_size'),
        ({'start_rect': (1, 100, 1)}, 'start_rect.y'),
        ({'start_rect': (1, 1, 1.5)}, 'start_rect.scale'),
        ({'end_rect': (1, 2)}, 'end_rect'),
        ({'method': 'bicubic'}, 'method'),
        ({'translation': 'sin'}, 'translation'),
        ({'translation': lambda t: float('nan')}, 'translation'),
        ({'interpolation_order': 6}, 'interpolation_order'),
        ({'edge_mode': 'wrap'}, 'edge_mode'),
        ({'filter_kernel_size': 0}, 'filter_kernel_size'),
        ({'filter_bucket': -1}, 'filter_bucket'),
        ({'workers': -1}, 'workers'),
    ],
)
def test_invalid_configuration_names_the_field(rgb_canvas: np.ndarray, overrides: dict, field: str) -> None:
    seq = KenBurnsSequence(rgb_canvas, _small_config(**overrides))

    with pytest.raises(ConfigurationError) as exc_info:
        seq.validate()

    assert exc_info.value.field == field
    assert str(exc_info.value).startswith(field)


def test_deprecated_method_warns_and_still_renders(rgb_canvas: np.ndarray,
                                                   capsys: pytest.CaptureFixture[str]) -> None:
    seq = KenBurnsSequence(rgb_canvas, _small_config(method='crop'))
    sink = FrameCollector(seq.frame_shape)

    assert seq.render(sink) == 50
    assert "deprecated" in capsys.readouterr().out


def test_write_failure_aborts_the_sink(rgb_canvas: np.ndarray) -> None:
    seq = KenBurnsSequence(rgb_canvas, _small_config())
    sink = RecordingSink(seq.frame_shape, fail_on='write_frame', fail_at_frame=3)

    with pytest.raises(SinkError) as exc_info:
        seq.render(sink)

    assert isinstance(exc_info.value.__cause__, OSError)
    assert len(sink.frames) == 3
    assert sink.aborted
    assert 'close' not in sink.calls
    assert seq.state is RenderState.FAILED

    collector = FrameCollector(seq.frame_shape)
    assert seq.render(collector) == 50
    assert seq.state is RenderState.DONE


def test_open_failure_does_not_abort_an_unopened_sink(rgb_canvas: np.ndarray) -> None:
    seq = KenBurnsSequence(rgb_canvas, _small_config())
    sink = RecordingSink(seq.frame_shape, fail_on='open')

    with pytest.raises(SinkError):
        seq.render(sink)

    assert sink.calls == ['open']
    assert not sink.aborted
    assert seq.state is RenderState.FAILED


def test_close_failure_aborts_the_sink(rgb_canvas: np.ndarray) -> None:
    seq = KenBurnsSequence(rgb_canvas, _small_config())
    sink = RecordingSink(seq.frame_shape, fail_on='close')

    with pytest.raises(SinkError):
        seq.render(sink)

    assert len(sink.frames) == 50
    assert sink.calls[-2:] == ['close', 'abort']
    assert seq.state is RenderState.FAILED


def test_sink_with_wrong_frame_shape_is_aborted(rgb_canvas: np.ndarray) -> None:
    seq = KenBurnsSequence(rgb_canvas, _small_config())
    sink = RecordingSink((12, 16))

    with pytest.raises(SinkError):
        seq.render(sink)

    assert sink.aborted
    assert sink.frames == []


def test_viewport_outside_the_canvas(rgb_canvas: np.ndarray) -> None:
    # 40 px wide viewport starting at x=70 on an 80 px canvas
    config = _small_config(end_rect=(70, 1, 0.5), edge_mode='error')
    seq = KenBurnsSequence(rgb_canvas, config)
    sink = RecordingSink(seq.frame_shape)

    with pytest.raises(SamplingError):
        seq.render(sink)
    assert sink.aborted
    assert seq.state is RenderState.FAILED

    seq.config = _small_config(end_rect=(70, 1, 0.5))
    collector = FrameCollector(seq.frame_shape)
    assert seq.render(collector) == 50
    assert np.isfinite(collector.frames[-1]).all()


def test_preview_rects(rgb_canvas: np.ndarray) -> None:
    seq = KenBurnsSequence(rgb_canvas, _small_config())

    preview = seq.preview_rects(5)

    assert len(preview) == 5
    assert preview.frame_indices[0] == 0
    assert preview.frame_indices[-1] == 49
    assert preview[0].isclose(Rect(1, 1, 1))
    assert preview[-1].isclose(Rect.from_value(seq.config.end_rect))
    assert list(preview) == list(preview)
    assert len(preview[1:3]) == 2
    assert len(seq.preview_rects(100)) == 50


@pytest.mark.parametrize("sample_count", [1, 0, 2.5, True])
def test_preview_rects_rejects_bad_sample_counts(rgb_canvas: np.ndarray, sample_count) -> None:
    seq = KenBurnsSequence(rgb_canvas, _small_config())

    with pytest.raises(ConfigurationError) as exc_info:
        seq.preview_rects(sample_count)
    assert exc_info.value.field == 'sample_count'


def test_antialias_prefilters_zoomed_out_frames(rgb_canvas: np.ndarray, monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    original = kenburns.antialias.prefilter

    def counting_prefilter(canvas, spacing, kernel_size):
        calls.append(spacing)
        return original(canvas, spacing, kernel_size)

    monkeypatch.setattr(kenburns.antialias, 'prefilter', counting_prefilter)

    seq = KenBurnsSequence(rgb_canvas, _small_config(antialias=False))
    list(seq.frames())
    assert calls == []

    # spacing falls from 5 to 2.5 over the zoom; bucket 1 keeps at most 4 filtered canvases
    seq.config = _small_config(antialias=True, filter_bucket=1.0)
    frames = list(seq.frames())
    assert len(frames) == 50
    assert 1 <= len(calls) <= 4
    assert all(spacing > 1 for spacing in calls)


def test_config_replacement_resets_the_state(rgb_canvas: np.ndarray) -> None:
    seq = KenBurnsSequence(rgb_canvas, _small_config())
    seq.render(FrameCollector(seq.frame_shape))
    assert seq.state is RenderState.DONE

    seq.config = _small_config(duration=1)

    assert seq.state is RenderState.UNVALIDATED
    assert seq.frame_count == 25
    assert seq.config.end_rect is not None


def test_parallel_render_matches_sequential(rgb_canvas: np.ndarray) -> None:
    sequential = KenBurnsSequence(rgb_canvas, _small_config(duration=0.4, antialias=True))
    parallel = KenBurnsSequence(rgb_canvas, _small_config(duration=0.4, antialias=True, workers=2))

    expected = FrameCollector(sequential.frame_shape)
    actual = FrameCollector(parallel.frame_shape)
    sequential.render(expected)
    parallel.render(actual)

    assert len(actual.frames) == len(expected.frames) == 10
    for a, b in zip(actual.frames, expected.frames):
        np.testing.assert_array_equal(a, b)


class _PlainSink:
    """open/write_frame/close only, no VideoSink base."""

    def __init__(self):
        self.calls = []

    def open(self):
        self.calls.append('open')

    def write_frame(self, frame):
        self.calls.append('write_frame')
        raise OSError("encoder crashed")

    def close(self):
        self.calls.append('close')


def test_sink_without_abort_is_closed_on_failure(rgb_canvas: np.ndarray) -> None:
    seq = KenBurnsSequence(rgb_canvas, _small_config())
    sink = _PlainSink()

    with pytest.raises(SinkError) as exc_info:
        seq.render(sink)

    assert isinstance(exc_info.value.__cause__, OSError)
    assert sink.calls == ['open', 'write_frame', 'close']
    assert seq.state is RenderState.FAILED
