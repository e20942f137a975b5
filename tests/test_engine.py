import threading

import numpy as np
import pytest
from PIL import Image

from colorkmeans import (
    ClusteringStatus,
    Colorspace,
    KMeansColorClusterer,
    KMeansColorConfig,
    PixelBuffer,
    segment_buffer,
    segment_image
)
from colorkmeans.color import parse_seed_colors

from conftest import make_image


def test_red_blue_scenario_converges_in_one_iteration(red_blue_buffer):
    seeds = parse_seed_colors("red blue")
    result = KMeansColorClusterer(KMeansColorConfig(seedcolors="red blue")).fit(red_blue_buffer, seeds)

    assert result.status is ClusteringStatus.CONVERGED
    assert result.n_iter == 1
    assert result.final_rmse == 0.0
    assert result.counts.tolist() == [2, 2]
    assert result.reshape_labels().tolist() == [[0, 0], [1, 1]]
    assert np.array_equal(result.render(red_blue_buffer).data, red_blue_buffer.data)


def test_single_color_image_keeps_its_color():
    color = np.array([0.2, 0.4, 0.6])
    buffer = PixelBuffer(np.tile(color, (4, 5, 1)))
    segmented, result = segment_buffer(buffer, KMeansColorConfig(numcolors=3))

    assert result.n_clusters >= 2
    assert np.count_nonzero(result.counts) == 1
    assert len(np.unique(segmented.pixels, axis=0)) == 1
    assert np.allclose(segmented.pixels, color, rtol=0, atol=1e-12)


@pytest.mark.parametrize("numcolors", [2, 3, 6])
def test_output_has_at_most_k_colors(random_buffer, numcolors):
    segmented, result = segment_buffer(random_buffer, KMeansColorConfig(numcolors=numcolors))
    assert result.n_clusters <= numcolors
    assert len(np.unique(segmented.pixels, axis=0)) <= numcolors


def test_loop_terminates_within_maxiters(random_buffer):
    config = KMeansColorConfig(numcolors=5, maxiters=3, convergence=0.0)
    _, result = segment_buffer(random_buffer, config)

    assert result.n_iter <= 3
    assert result.status.is_terminal
    if result.status is ClusteringStatus.MAXITERS_REACHED:
        assert result.n_iter == 3
        assert all(state.rmse > 0 for state in result.history)
    else:
        assert result.final_rmse == 0.0


def test_zero_convergence_stops_only_on_identical_colors(red_blue_buffer):
    config = KMeansColorConfig(seedcolors="red blue", convergence=0.0, maxiters=10)
    _, result = segment_buffer(red_blue_buffer, config)
    assert result.status is ClusteringStatus.CONVERGED
    assert result.n_iter == 1


def test_rerun_on_own_output_converges_immediately(random_buffer):
    segmented, _ = segment_buffer(random_buffer, KMeansColorConfig(numcolors=4))
    seeds = np.unique(segmented.pixels, axis=0)

    result = KMeansColorClusterer(KMeansColorConfig(maxiters=10)).fit(segmented, seeds)

    assert result.n_iter == 1
    assert result.final_rmse == 0.0
    assert result.status is ClusteringStatus.CONVERGED
    assert np.array_equal(result.render(segmented).data, segmented.data)


def test_runs_are_reproducible(random_buffer):
    config = KMeansColorConfig(numcolors=4)
    _, first = segment_buffer(random_buffer, config)
    _, second = segment_buffer(random_buffer, config)
    assert np.array_equal(first.labels, second.labels)
    assert np.array_equal(first.colors, second.colors)


def test_threaded_chunks_match_single_chunk(random_buffer):
    _, single = segment_buffer(random_buffer, KMeansColorConfig(numcolors=4))
    _, chunked = segment_buffer(
        random_buffer,
        KMeansColorConfig(numcolors=4, n_jobs=3, chunk_size=37)
    )
    assert np.array_equal(single.labels, chunked.labels)
    assert np.allclose(single.colors, chunked.colors, rtol=0, atol=1e-12)
    assert single.n_iter == chunked.n_iter


def test_history_records_every_iteration(random_buffer):
    seen = []
    config = KMeansColorConfig(numcolors=3, maxiters=5, convergence=0.0)
    seeds = np.array([[0.0, 0.0, 0.0], [0.5, 0.5, 0.5], [1.0, 1.0, 1.0]])
    clusterer = KMeansColorClusterer(config, on_iteration=seen.append)
    result = clusterer.fit(random_buffer, seeds)

    assert [state.iteration for state in result.history] == list(range(1, result.n_iter + 1))
    assert len(seen) == result.n_iter
    assert all(a is b for a, b in zip(seen, result.history))
    assert np.array_equal(result.history[0].previous_colors, seeds)
    for before, after in zip(result.history, result.history[1:]):
        assert np.array_equal(before.updated_colors, after.previous_colors)
    assert clusterer.status is result.status


def _gradient_buffer():
    ramp = np.linspace(0.0, 1.0, 16)
    return PixelBuffer(np.repeat(ramp[None, :, None], 3, axis=2).repeat(4, axis=0))


def test_cancel_before_start_renders_from_seeds():
    event = threading.Event()
    event.set()
    seeds = np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]])
    buffer = _gradient_buffer()

    result = KMeansColorClusterer(KMeansColorConfig(), cancel_event=event).fit(buffer, seeds)

    assert result.status is ClusteringStatus.CANCELLED
    assert result.n_iter == 0
    assert np.array_equal(result.colors, seeds)
    assert result.counts.sum() == buffer.n_pixels


def test_cancel_mid_run_keeps_last_completed_iteration():
    event = threading.Event()
    seeds = np.array([[0.0, 0.0, 0.0], [1.0, 1.0, 1.0]])
    config = KMeansColorConfig(maxiters=10, convergence=0.0)
    clusterer = KMeansColorClusterer(config, on_iteration=lambda state: event.set(), cancel_event=event)

    result = clusterer.fit(_gradient_buffer(), seeds)

    assert result.status is ClusteringStatus.CANCELLED
    assert result.n_iter == 1
    assert np.array_equal(result.colors, result.history[0].updated_colors)


def test_fit_rejects_fewer_than_two_seeds(red_blue_buffer):
    with pytest.raises(ValueError):
        KMeansColorClusterer().fit(red_blue_buffer, np.array([[1.0, 0.0, 0.0]]))


def test_clusters_in_lab_space():
    rgb = np.array([[[1.0, 0.0, 0.0], [0.9, 0.05, 0.05]], [[0.0, 0.0, 1.0], [0.05, 0.05, 0.9]]])
    buffer = PixelBuffer.from_srgb(rgb, Colorspace.LAB)
    config = KMeansColorConfig(numcolors=2, colorspace="LAB")
    segmented, result = segment_buffer(buffer, config)

    assert segmented.colorspace is Colorspace.LAB
    labels = result.reshape_labels()
    assert labels[0, 0] == labels[0, 1]
    assert labels[1, 0] == labels[1, 1]
    assert labels[0, 0] != labels[1, 0]


@pytest.mark.parametrize("space", list(Colorspace))
def test_pipeline_on_own_output_with_hex_seeds_is_unchanged(tmp_path, space):
    rgb = np.random.default_rng(4).integers(0, 256, size=(16, 12, 3))
    src = make_image(tmp_path / "in.png", rgb)
    first = tmp_path / "first.png"
    second = tmp_path / "second.png"

    segment_image(src, first, KMeansColorConfig(numcolors=4, colorspace=space))
    with Image.open(first) as img:
        rendered = np.asarray(img.convert("RGB"))
    palette = np.unique(rendered.reshape(-1, 3), axis=0)
    seedcolors = [f"#{r:02x}{g:02x}{b:02x}" for r, g, b in palette]

    result = segment_image(first, second, KMeansColorConfig(seedcolors=seedcolors, colorspace=space))

    assert result.n_iter == 1
    assert result.final_rmse == 0.0
    assert second.read_bytes() == first.read_bytes()
