import os
import sys
import pandas as pd

from default_df_initializer import DefaultDfInitializer

SUPPORTED = (".csv", ".tsv", ".json", ".parquet", ".xlsx")


class FileTypeHandler:
    DEFAULT_SHEET_NAME = "Sheet1"

    def __init__(self, path: str):
        self.path = path
        _, ext = os.path.splitext(path)
        self.ext = ext.lower()

        if self.ext not in SUPPORTED:
            print(f"Unsupported file type (use {', '.join(SUPPORTED)})", file=sys.stderr)
            sys.exit(1)

    def load(self) -> dict[str, pd.DataFrame]:
        """Sheets by name; one sheet for single-table formats."""
        if not os.path.exists(self.path) or os.path.getsize(self.path) == 0:
            return self._default_sheet_dict()

        if self.ext == ".xlsx":
            return self._load_excel()

        if self.ext == ".csv":
            df = self._read_delimited(",")
        elif self.ext == ".tsv":
            df = self._read_delimited("\t")
        elif self.ext == ".json":
            df = pd.read_json(self.path)
        else:
            self._ensure_parquet_engine()
            df = pd.read_parquet(self.path)
        return {self._sheet_name(): self._ensure_non_empty(self._parse_dates(df))}

    def _sheet_name(self) -> str:
        """Single-table formats name their one sheet after the file, present or not."""
        if self.ext == ".xlsx":
            return self.DEFAULT_SHEET_NAME
        return os.path.splitext(os.path.basename(self.path))[0] or self.DEFAULT_SHEET_NAME

    def _read_delimited(self, sep: str) -> pd.DataFrame:
        try:
            return pd.read_csv(self.path, sep=sep)
        except pd.errors.EmptyDataError:
            return self._default_df()

    @staticmethod
    def _parse_dates(df: pd.DataFrame) -> pd.DataFrame:
        # text columns that are entirely ISO dates become datetime columns
        out = df
        for col in df.columns:
            series = df[col]
            if not pd.api.types.is_string_dtype(series.dtype):
                continue
            values = series.dropna()
            if values.empty or not values.map(lambda v: isinstance(v, str)).all():
                continue
            parsed = pd.to_datetime(values, format="%Y-%m-%d", errors="coerce")
            if parsed.notna().all():
                if out is df:
                    out = df.copy()
                out[col] = pd.to_datetime(series, format="%Y-%m-%d", errors="coerce")
        return out

    def _ensure_non_empty(self, df: pd.DataFrame) -> pd.DataFrame:
        if df is None or df.shape[1] == 0:
            return self._default_df()
        return df

    def _default_df(self) -> pd.DataFrame:
        return DefaultDfInitializer().create()

    def _default_sheet_dict(self, df: pd.DataFrame | None = None) -> dict[str, pd.DataFrame]:
        base = df if isinstance(df, pd.DataFrame) else self._default_df()
        return {self._sheet_name(): base}

    def _load_excel(self) -> dict[str, pd.DataFrame]:
        self._ensure_excel_engine()
        sheets = pd.read_excel(self.path, sheet_name=None)
        if not sheets:
            return self._default_sheet_dict()
        cleaned = {}
        for name, df in sheets.items():
            if not isinstance(df, pd.DataFrame):
                continue
            cleaned[str(name)] = self._ensure_non_empty(self._parse_dates(df))
        return cleaned if cleaned else self._default_sheet_dict()

    def _ensure_parquet_engine(self):
        try:
            import pyarrow  # noqa: F401

            return
        except ImportError:
            pass
        print("Parquet support requires pyarrow. Install via: pip install pyarrow", file=sys.stderr)
        sys.exit(1)

    def _ensure_excel_engine(self):
        try:
            import openpyxl  # noqa: F401

            return
        except ImportError:
            pass
        print("XLSX support requires openpyxl. Install via: pip install openpyxl", file=sys.stderr)
        sys.exit(1)
