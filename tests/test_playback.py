import numpy as np
import pytest
from matplotlib import pyplot as plt

from wavecast.core.records import Channel
from wavecast.errors import InvalidDatasetError, InvalidDelayError, RenderSetupError, TargetLostError
from wavecast.ingest.sources import InMemoryRecordSource
from wavecast.viz import playback as playback_module
from wavecast.viz.capture import MovieAssembler
from wavecast.viz.map import render_record
from wavecast.viz.playback import Pacer, PlaybackLoop, PlaybackState, build_initial_frame, play_movie
from wavecast.config import PlaybackConfig

U = Channel("u", "u-component of wind", "m s-1")
V = Channel("v", "v-component of wind", "m s-1")


class RecordingSleep:
    def __init__(self, on_call=None):
        self.calls = []
        self.on_call = on_call

    def __call__(self, seconds):
        self.calls.append(seconds)
        if self.on_call is not None:
            self.on_call(len(self.calls))


def test_small_dataset_movie(small_dataset, plain_axes):
    movies = play_movie(small_dataset, delay=0, make_movie=True, **plain_axes)
    assert len(movies) == 1
    movie = movies[0]
    assert len(movie) == 3
    assert [frame.step for frame in movie] == [0, 1, 2]
    np.testing.assert_array_equal(movie.times, small_dataset.times)
    assert movie.name == "hs"


def test_final_mesh_hides_missing_cell(small_dataset, plain_axes):
    source = InMemoryRecordSource(small_dataset)
    loop = PlaybackLoop(source, PlaybackConfig(delay=0, map_options=plain_axes))
    loop.run()
    mesh = loop.registry[0].mesh
    alpha = np.asarray(mesh.get_alpha()).reshape(3, 3)
    expected = np.ones((3, 3))
    expected[1:, 1:] = 0.0
    np.testing.assert_array_equal(alpha, expected)
    assert np.asarray(mesh.get_array())[0, 0] == 3.0
    assert loop.registry[0].title.get_text().endswith("2014-02-05 06:00:00")


def test_negative_delay_fails_before_rendering(small_dataset):
    calls = []

    def renderer(record, **options):
        calls.append(record)
        return render_record(record, **options)

    with pytest.raises(InvalidDelayError):
        play_movie(small_dataset, delay=-1, renderer=renderer)
    assert calls == []


@pytest.mark.parametrize("delay", [float("nan"), float("inf"), "fast", True])
def test_invalid_delay_values(small_dataset, delay):
    with pytest.raises(InvalidDelayError):
        play_movie(small_dataset, delay=delay)


def test_missing_dataset_is_invalid():
    with pytest.raises(InvalidDatasetError):
        play_movie()


def test_default_delay_paces_every_step_after_the_first(small_dataset, plain_axes, monkeypatch):
    delays = []
    monkeypatch.setattr(Pacer, "wait", lambda self: delays.append(self.delay))
    play_movie(small_dataset, **plain_axes)
    assert delays == [0.33, 0.33]


def test_zero_delay_never_sleeps(make_dataset, plain_axes):
    sleep = RecordingSleep()
    play_movie(make_dataset(n_times=4), delay=0, pacer=Pacer(0.0, sleep=sleep), **plain_axes)
    assert sleep.calls == []


def test_positive_delay_sleeps_between_steps(make_dataset, plain_axes):
    sleep = RecordingSleep()
    play_movie(make_dataset(n_times=4), delay=0.25, pacer=Pacer(0.25, sleep=sleep), **plain_axes)
    assert sleep.calls == [0.25, 0.25, 0.25]


def test_closed_map_aborts_playback(make_dataset, plain_axes, monkeypatch):
    dataset = make_dataset(n_times=5, channels=(U, V))
    captured = []
    real_capture = MovieAssembler.capture

    def spy(self, step, time):
        captured.append(step)
        return real_capture(self, step, time)

    monkeypatch.setattr(MovieAssembler, "capture", spy)
    loop = PlaybackLoop(InMemoryRecordSource(dataset), PlaybackConfig(delay=0.1, make_movie=True, map_options=plain_axes))

    def remove_second_map(n_calls):
        # pacing for step 3 happens right before its update
        if n_calls == 3:
            loop.registry[1].ax.remove()

    loop.pacer = Pacer(0.1, sleep=RecordingSleep(remove_second_map))
    with pytest.raises(TargetLostError):
        loop.run()
    assert loop.state is PlaybackState.ABORTED
    assert loop.steps_completed == 3
    assert captured == [0, 1, 2]


def test_loop_runs_only_once(small_dataset, plain_axes):
    loop = PlaybackLoop(InMemoryRecordSource(small_dataset), PlaybackConfig(delay=0, map_options=plain_axes))
    assert loop.run() is None
    assert loop.state is PlaybackState.DONE
    with pytest.raises(RuntimeError):
        loop.run()


def test_too_few_parents_is_a_setup_error(make_dataset, plain_axes):
    _, ax = plt.subplots()
    with pytest.raises(RenderSetupError):
        play_movie(make_dataset(channels=(U, V)), delay=0, parents=[ax], **plain_axes)


def test_renderer_must_return_one_target_per_channel(make_dataset, plain_axes):
    record = make_dataset(channels=(U, V)).record(0)

    def short_renderer(rec, **options):
        return render_record(rec, **options)[:1]

    with pytest.raises(RenderSetupError):
        build_initial_frame(record, renderer=short_renderer, options=plain_axes)


def test_target_count_is_fixed_for_the_whole_run(make_dataset, plain_axes, monkeypatch):
    dataset = make_dataset(n_times=4, channels=(U, V))
    seen = []
    real_update = playback_module.update_targets

    def spy(record, targets):
        seen.append(tuple(targets))
        return real_update(record, targets)

    monkeypatch.setattr(playback_module, "update_targets", spy)
    loop = PlaybackLoop(InMemoryRecordSource(dataset), PlaybackConfig(delay=0, map_options=plain_axes))
    loop.run()
    assert len(seen) == 3
    assert all(targets == loop.registry.targets for targets in seen)
    assert all(len(target.ax.collections) == 1 for target in loop.registry.targets)


def test_streaming_archive_playback(archive_path, plain_axes):
    movies = play_movie(str(archive_path), delay=0, make_movie=True, **plain_axes)
    assert [len(movie) for movie in movies] == [3]
