def test_imports():
    """
    @brief
    Verifies that all core Orplan modules are importable.

    @details
    Ensures package structure integrity and confirms that the public
    facade is re-exported from the top-level package.
    """
    import orplan
    import orplan.classifier
    import orplan.conflicts
    import orplan.dataloader
    import orplan.export
    import orplan.metrics
    import orplan.transform
    import orplan.validator

    # --- Assert ---
    assert all(
        [
            orplan.classifier,
            orplan.conflicts,
            orplan.dataloader,
            orplan.export,
            orplan.metrics,
            orplan.transform,
            orplan.validator,
        ]
    )
    assert callable(orplan.import_schedule)
    assert orplan.ScheduleImporter is not None
