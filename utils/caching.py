"""
Caching utilities for ExprQuartiles
Fingerprints used to key memoized plots
"""
import hashlib

import pandas as pd


def hash_dataframe(df: pd.DataFrame) -> str:
    """Create a hash string from a DataFrame for caching purposes"""
    if df is None:
        return "none"
    # Labels in order plus a full value hash, so reordering columns changes the key
    hash_str = f"{df.shape}_{list(df.columns)}_{list(df.index)}"
    values = pd.util.hash_pandas_object(df, index=False).values.tobytes()
    return hashlib.md5(hash_str.encode() + values).hexdigest()
