import numpy as np
import pytest
from matplotlib import pyplot as plt

import imageio.v3 as iio

from wavecast.core.records import Channel
from wavecast.viz.capture import Frame, MovieAssembler, MovieBuffer, capture_frame, save_frames
from wavecast.viz.playback import build_initial_frame

U = Channel("u", "u-component of wind", "m s-1")
V = Channel("v", "v-component of wind", "m s-1")


def _frame(step):
    return Frame(step=step, time=np.datetime64("2012-05-04T00:00", "ns"), image=np.zeros((2, 3, 4), dtype=np.uint8))


def test_movie_buffer_rejects_gaps():
    movie = MovieBuffer(channel=0, name="hs")
    movie.append(_frame(0))
    with pytest.raises(ValueError):
        movie.append(_frame(2))
    movie.append(_frame(1))
    assert [frame.step for frame in movie] == [0, 1]
    assert movie[-1].size == (3, 2)


def test_captured_frame_is_read_only_rgba(make_dataset, plain_axes):
    registry = build_initial_frame(make_dataset().record(0), options=plain_axes)
    frame = capture_frame(registry.figures[0], 0, np.datetime64("2012-05-04T00:00"))
    assert frame.image.dtype == np.uint8
    assert frame.image.shape[2] == 4
    assert not frame.image.flags.writeable
    assert frame.time.dtype == np.dtype("datetime64[ns]")


def test_shared_figure_yields_one_capture_for_all_channels(make_dataset, plain_axes):
    record = make_dataset(channels=(U, V)).record(0)
    registry = build_initial_frame(record, options=plain_axes)
    assert len(registry.figures) == 1

    assembler = MovieAssembler(registry, names=["u", "v"])
    assembler.capture(0, record.time)
    u_movie, v_movie = assembler.movies()
    assert (u_movie.name, v_movie.name) == ("u", "v")
    assert u_movie[0] is v_movie[0]


def test_separate_parents_yield_separate_frames(make_dataset, plain_axes):
    record = make_dataset(channels=(U, V)).record(0)
    _, ax_u = plt.subplots(figsize=(4, 3))
    _, ax_v = plt.subplots(figsize=(5, 3))
    registry = build_initial_frame(record, options={**plain_axes, "parents": [ax_u, ax_v]})
    assert len(registry.figures) == 2

    assembler = MovieAssembler(registry)
    assembler.capture(0, record.time)
    u_movie, v_movie = assembler.movies()
    assert u_movie[0] is not v_movie[0]
    assert u_movie[0].size != v_movie[0].size


def test_save_frames_writes_numbered_pngs(tmp_path):
    movie = MovieBuffer(channel=0, name="hs")
    for step in range(3):
        movie.append(_frame(step))
    paths = save_frames(movie, tmp_path / "hs", prefix="hs")
    assert [path.name for path in paths] == ["hs_00000.png", "hs_00001.png", "hs_00002.png"]
    assert iio.imread(paths[0]).shape == (2, 3, 4)
