"""
Clustering module - keyword feature vectors and K-means.
"""
from .vectorizer import FeatureVector, build_feature_vectors, keyword_features
from .kmeans import KMeansResult, KeywordClusterer, kmeans, summarize_clusters, theme_label

__all__ = [
    "FeatureVector",
    "build_feature_vectors",
    "keyword_features",
    "KMeansResult",
    "KeywordClusterer",
    "kmeans",
    "summarize_clusters",
    "theme_label",
]
