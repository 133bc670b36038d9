import math

import pytest

from htsbonsai.vocoder.lsp import LineSpectralPairs

LSP = [0.5, 0.4, 0.9, 1.5, 2.2, 2.8]


def make(values, use_log_gain=False):
    return LineSpectralPairs(values, 0.42, use_log_gain, 1, -1.0)


def minimum_gap(n):
    return 0.25 * math.pi / n


def test_stability_leaves_well_spaced_values():
    lsp = make(LSP)
    lsp.check_lsp_stability()
    assert lsp.values == LSP


def test_stability_separates_close_pair():
    values = [0.5, 0.4, 0.9, 0.9001, 2.2, 2.8]
    lsp = make(values)
    lsp.check_lsp_stability()
    assert lsp[3] - lsp[2] >= minimum_gap(6) - 1e-12
    assert (lsp[2] + lsp[3]) / 2 == pytest.approx((values[2] + values[3]) / 2)
    assert lsp[0] == values[0]


def test_stability_clamps_last_frequency():
    lsp = make([0.5, 0.4, 0.9, 1.5, 2.2, 3.1])
    lsp.check_lsp_stability()
    assert lsp[-1] == pytest.approx(math.pi - minimum_gap(6))


def test_stability_raises_first_frequency():
    lsp = make([0.5, 0.01, 0.9, 1.5, 2.2, 2.8])
    lsp.check_lsp_stability()
    assert lsp[1] == pytest.approx(minimum_gap(6))


def test_lsp2mgc_shape_and_parameters():
    mgc = make(LSP).lsp2mgc()
    assert len(mgc) == len(LSP)
    assert mgc.alpha == 0.42
    assert mgc.gamma == -1.0
    assert all(math.isfinite(v) for v in mgc)


def test_postfilter_without_beta_leaves_values():
    lsp = make(LSP)
    lsp.postfilter_lsp(0.0)
    assert lsp.values == LSP


def test_postfilter_on_short_input_leaves_values():
    lsp = make([0.5, 0.4])
    lsp.postfilter_lsp(0.4)
    assert lsp.values == [0.5, 0.4]


@pytest.mark.parametrize("use_log_gain", [False, True])
def test_postfilter_keeps_edge_frequencies(use_log_gain):
    lsp = make(LSP, use_log_gain=use_log_gain)
    lsp.postfilter_lsp(0.4)
    assert len(lsp) == len(LSP)
    assert lsp[1] == LSP[1]
    assert lsp[-1] == LSP[-1]
    assert all(math.isfinite(v) for v in lsp)