from __future__ import annotations

import hashlib

from buildcache.models import Component
from buildcache.services import fingerprint_service


def _component(name: str, shasum: str, version: str = "1.0") -> Component:
    return Component(name=name, version=version, shasum=shasum, install_dir="/opt/demo")


def _sha(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def test_tag_without_dependencies_hashes_own_shasum():
    component = _component("A", "aaa")

    assert fingerprint_service.compute_tag(component, [component]) == f"A-{_sha('aaa')}"


def test_tag_joins_closure_shasums_in_build_order():
    zlib = _component("zlib", "z1")
    openssl = _component("openssl", "o1")
    ruby = _component("ruby", "r1")

    tag = fingerprint_service.compute_tag(ruby, [zlib, openssl, ruby])

    assert tag == f"ruby-{_sha('z1|o1|r1')}"


def test_tag_is_deterministic():
    deps = [_component("zlib", "z1"), _component("openssl", "o1")]
    ruby = _component("ruby", "r1")
    order = deps + [ruby]

    assert fingerprint_service.compute_tag(ruby, order) == fingerprint_service.compute_tag(
        ruby, list(order)
    )


def test_changing_a_dependency_shasum_changes_the_tag():
    ruby = _component("ruby", "r1")
    before = fingerprint_service.compute_tag(ruby, [_component("zlib", "z1"), ruby])
    after = fingerprint_service.compute_tag(ruby, [_component("zlib", "z2"), ruby])

    assert before != after
    assert before.startswith("ruby-") and after.startswith("ruby-")


def test_dependencies_after_the_component_are_ignored():
    zlib = _component("zlib", "z1")
    ruby = _component("ruby", "r1")

    short = fingerprint_service.compute_tag(ruby, [zlib, ruby])
    longer = fingerprint_service.compute_tag(
        ruby, [zlib, ruby, _component("bundler", "b1"), _component("gems", "g1")]
    )

    assert short == longer


def test_removing_a_preceding_dependency_removes_its_shasum():
    zlib = _component("zlib", "z1")
    openssl = _component("openssl", "o1")
    ruby = _component("ruby", "r1")

    assert fingerprint_service.fingerprint_input(ruby, [zlib, openssl, ruby]) == "z1|o1|r1"
    assert fingerprint_service.fingerprint_input(ruby, [openssl, ruby]) == "o1|r1"


def test_closure_matches_on_name_and_version():
    old_ruby = _component("ruby", "r0", version="2.7")
    zlib = _component("zlib", "z1")
    ruby = _component("ruby", "r1", version="3.2")

    closure = fingerprint_service.dependency_closure(ruby, [old_ruby, zlib, ruby])

    assert closure == [old_ruby, zlib]


def test_closure_uses_identity_not_shasum():
    zlib = _component("zlib", "z1")
    listed = _component("ruby", "listed-shasum")
    target = _component("ruby", "own-shasum")

    assert fingerprint_service.dependency_closure(target, [zlib, listed]) == [zlib]
    assert fingerprint_service.fingerprint_input(target, [zlib, listed]) == "z1|own-shasum"


def test_missing_component_spans_entire_build_order():
    zlib = _component("zlib", "z1")
    openssl = _component("openssl", "o1")
    orphan = _component("orphan", "x1")

    closure = fingerprint_service.dependency_closure(orphan, [zlib, openssl])

    assert closure == [zlib, openssl]
    assert fingerprint_service.compute_tag(orphan, [zlib, openssl]) == f"orphan-{_sha('z1|o1|x1')}"


def test_build_order_is_not_mutated():
    order = [_component("zlib", "z1"), _component("ruby", "r1")]
    snapshot = list(order)

    fingerprint_service.compute_tag(order[1], order)

    assert order == snapshot


def test_resolver_memoizes_per_component_and_order(monkeypatch):
    resolver = fingerprint_service.FingerprintResolver()
    ruby = _component("ruby", "r1")
    calls = {"count": 0}
    original = fingerprint_service.compute_tag

    def counting_compute_tag(component, build_order):
        calls["count"] += 1
        return original(component, build_order)

    monkeypatch.setattr(fingerprint_service, "compute_tag", counting_compute_tag)

    first = resolver.tag(ruby, [ruby])
    second = resolver.tag(ruby, (ruby,))

    assert first == second == f"ruby-{_sha('r1')}"
    assert calls["count"] == 1

    with_dep = resolver.tag(ruby, [_component("zlib", "z1"), ruby])
    assert with_dep == f"ruby-{_sha('z1|r1')}"
    assert calls["count"] == 2


def test_resolver_is_bounded():
    resolver = fingerprint_service.FingerprintResolver(maxsize=2)

    for idx in range(5):
        component = _component(f"c{idx}", f"s{idx}")
        resolver.tag(component, [component])

    info = resolver.cache_info()
    assert info.currsize == 2
    assert info.misses == 5
