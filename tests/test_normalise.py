import re

import pytest

from p2p_metrics import normalise_string

_VALID = re.compile(r'^[A-Za-z0-9_]+$')


@pytest.mark.parametrize('raw,expected', [
    ('libp2p_peers', 'libp2p_peers'),
    ('/ipfs/id/1.0.0', '_ipfs_id_1_0_0'),
    ('global sent', 'global_sent'),
    ('a---b', 'a_b'),
    ('a__b', 'a_b'),
    ('héllo wörld', 'h_llo_w_rld'),
])
def test_normalise_replaces_and_collapses(raw, expected):
    assert normalise_string(raw) == expected


@pytest.mark.parametrize('raw', ['/meshsub/1.1.0', 'a  b', 'x.y.z', '__dunder__', 'ok_name', '!@#$'])
def test_normalise_is_idempotent_and_valid(raw):
    once = normalise_string(raw)
    assert normalise_string(once) == once
    assert _VALID.match(once)
    assert '__' not in once


def test_normalise_empty_string_stays_empty():
    assert normalise_string('') == ''
