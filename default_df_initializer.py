import pandas as pd


class DefaultDfInitializer:
    """Small sample table shown when no file (or an empty one) is given."""

    def create(self) -> pd.DataFrame:
        today = pd.Timestamp.today().normalize()
        return pd.DataFrame(
            {
                "id": [1, 2, 3, 4, 5, 6],
                "name": [
                    "Replace furnace filter",
                    "Gutter cleaning",
                    "Repaint fence",
                    "Water heater flush",
                    "Roof inspection",
                    "Smoke detector batteries",
                ],
                "category": ["HVAC", "Exterior", "Exterior", "Plumbing", "Exterior", "Safety"],
                "vendor_id": [3, 1, pd.NA, 2, 1, pd.NA],
                "cost": [24.99, 180.0, 1250.0, None, 450.0, 18.5],
                "due": [
                    today - pd.Timedelta(days=12),
                    today + pd.Timedelta(days=9),
                    today + pd.Timedelta(days=60),
                    today - pd.Timedelta(days=3),
                    pd.NaT,
                    today + pd.Timedelta(days=1),
                ],
                "notes": [
                    "MERV 11, 16x25x1; buy the three-pack from the hardware store",
                    "",
                    "Two coats, semi-transparent stain",
                    None,
                    "Check flashing around the chimney after the winter storms",
                    "",
                ],
            }
        ).astype({"vendor_id": "Int64"})
