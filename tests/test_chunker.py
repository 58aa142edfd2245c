from docscrap.output.chunker import ChunkLimits, ChunkSize, bundle_parts, estimate_tokens


def test_chunk_size_counts_bytes_chars_and_tokens():
    size = ChunkSize.of("héllo")

    assert size == ChunkSize(bytes=6, chars=5, tokens=2)
    assert ChunkSize.of("") == ChunkSize()


def test_chunk_sizes_add_up():
    total = ChunkSize.of("ab") + ChunkSize.of("cde")

    assert total == ChunkSize(bytes=5, chars=5, tokens=2)


def test_estimate_tokens_rounds_up():
    assert estimate_tokens(0) == 0
    assert estimate_tokens(1) == 1
    assert estimate_tokens(4) == 1
    assert estimate_tokens(5) == 2


def test_limits_exceed_when_any_dimension_is_over():
    limits = ChunkLimits(max_bytes=100, max_chars=5)

    assert limits.exceeds(ChunkSize(bytes=10, chars=6, tokens=1))
    assert limits.exceeds(ChunkSize(bytes=101, chars=1, tokens=1))
    assert not limits.exceeds(ChunkSize(bytes=100, chars=5, tokens=999))
    assert ChunkLimits(max_tokens=2).exceeds_text("123456789")


def test_zero_limits_are_disabled():
    limits = ChunkLimits()

    assert not limits.enabled
    assert not limits.exceeds(ChunkSize(bytes=10**9, chars=10**9, tokens=10**9))


def _section(label: str) -> str:
    return f"### {label}\n\n" + label.lower() * 240 + "\n"


def test_bundles_two_sections_that_do_not_fit_together():
    section_a = _section("A")
    section_b = _section("B")

    bundles = bundle_parts([section_a, section_b], ChunkLimits(max_bytes=len(section_a) + 50))

    assert len(bundles) == 2
    assert "### A" in bundles[0]
    assert "### B" in bundles[1]


def test_bundles_keep_order_and_respect_limits():
    parts = [f"## Part {index}\n\n" + "x" * (20 + index * 7) + "\n" for index in range(12)]
    limits = ChunkLimits(max_bytes=120)

    bundles = bundle_parts(parts, limits)

    assert len(bundles) > 1
    for bundle in bundles:
        assert bundle.endswith("\n")
        assert not limits.exceeds(ChunkSize.of(bundle))
    joined = "".join(bundles)
    positions = [joined.index(f"## Part {index}\n") for index in range(12)]
    assert positions == sorted(positions)


def test_disabled_limits_produce_one_bundle():
    parts = ["## A\n\nalpha\n", "", "   ", "## B\n\nbeta\n"]

    assert bundle_parts(parts, ChunkLimits()) == ["## A\n\nalpha\n## B\n\nbeta\n"]


def test_oversized_section_becomes_its_own_bundle():
    big = "## Big\n\n" + "z" * 300 + "\n"

    bundles = bundle_parts(["## A\n\na\n", big, "## C\n\nc\n"], ChunkLimits(max_bytes=100))

    assert bundles == ["## A\n\na\n", big, "## C\n\nc\n"]


def test_input_within_smallest_limit_is_not_split():
    parts = ["## A\n\nalpha\n", "## B\n\nbeta\n"]
    total = sum(len(part.encode("utf-8")) for part in parts)

    bundles = bundle_parts(parts, ChunkLimits(max_bytes=total, max_chars=total * 10))

    assert bundles == ["".join(parts)]
