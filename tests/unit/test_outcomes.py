from app.ingestion.outcomes import Failed, Produced, Skipped


class TestArtifactOutcomes:
    def test_produced_exposes_value(self) -> None:
        assert Produced(b"jpeg").value_or_none() == b"jpeg"

    def test_skipped_and_failed_collapse_to_none(self) -> None:
        assert Skipped("small image").value_or_none() is None
        assert Failed("decode error").value_or_none() is None

    def test_outcomes_are_distinguishable_without_inspecting_logs(self) -> None:
        outcomes = [Produced("x"), Skipped("unsupported"), Failed("boom")]
        assert [type(o).__name__ for o in outcomes] == ["Produced", "Skipped", "Failed"]
        assert Skipped("a") == Skipped("a")
        assert Skipped("a") != Failed("a")
