import pytest

from delve.rng import RNGManager


def test_same_seed_same_streams():
    a = RNGManager("seed-1")
    b = RNGManager("seed-1")
    assert a.derive_seed("partition") == b.derive_seed("partition")
    assert [a.context_rng("entities").random() for _ in range(3)] == [
        b.context_rng("entities").random() for _ in range(3)
    ]


def test_domains_are_independent():
    rngm = RNGManager(123)
    assert rngm.derive_seed("partition") != rngm.derive_seed("corridors")
    assert rngm.derive_seed("rooms", 1) != rngm.derive_seed("rooms", 2)


def test_seed_canonicalisation():
    assert RNGManager(16).get_master_seed_hex() == "10"
    assert RNGManager("0x10").get_master_seed_hex() == "10"
    assert RNGManager(0).get_master_seed_hex() == "00"
    assert RNGManager(b"\xff").get_master_seed_hex() == "ff"


def test_missing_seed_is_drawn_and_kept():
    rngm = RNGManager(None)
    seed = rngm.effective_seed
    assert isinstance(seed, int)
    assert RNGManager(seed).derive_seed("entities") == rngm.derive_seed("entities")


def test_rejects_unsupported_seeds():
    with pytest.raises(TypeError):
        RNGManager(True)
    with pytest.raises(TypeError):
        RNGManager(1.5)
    with pytest.raises(ValueError):
        RNGManager(-3)


def test_text_seeds_do_not_collide_with_ints():
    # 0x616263 is the UTF-8 encoding of "abc"
    assert RNGManager("abc").get_master_seed_hex() != RNGManager(0x616263).get_master_seed_hex()
    assert RNGManager("abc").derive_seed("partition") != RNGManager(6382179).derive_seed("partition")
    assert RNGManager(" abc ").derive_seed("partition") == RNGManager("abc").derive_seed("partition")
