"""Audio operations: split, resample, trim and summary."""
