from __future__ import annotations

import logging
import math
import statistics

from social_graph.models import CentralityReport, GraphAnomaly

logger = logging.getLogger("graph-algorithms")

ANOMALY_METRICS: tuple[str, ...] = ("pagerank", "out_strength", "in_strength")


class AnomalyDetector:
    def __init__(self, z_score_threshold: float = 2.5, minimum_pagerank: float = 0.0001) -> None:
        self.z_score_threshold = z_score_threshold
        self.minimum_pagerank = minimum_pagerank

    def detect(self, report: CentralityReport) -> list[GraphAnomaly]:
        """Flag nodes whose metric lies ``z_score_threshold`` sample deviations from the mean.

        A metric with zero deviation (or fewer than two nodes) is skipped.
        PageRank outliers below ``minimum_pagerank`` are not reported.
        """
        anomalies: list[GraphAnomaly] = []
        for metric in ANOMALY_METRICS:
            values = {node_id: float(getattr(vector, metric)) for node_id, vector in report.vectors.items()}
            if len(values) < 2:
                continue

            mean = statistics.fmean(values.values())
            stddev = statistics.stdev(values.values(), xbar=mean)
            # float noise on a constant metric counts as zero deviation
            if math.isclose(stddev, 0.0, abs_tol=1e-12):
                logger.debug("anomaly metric=%s skipped, zero deviation", metric)
                continue

            for node_id, value in values.items():
                z_score = (value - mean) / stddev
                if abs(z_score) < self.z_score_threshold:
                    continue
                if metric == "pagerank" and value < self.minimum_pagerank:
                    continue
                anomalies.append(GraphAnomaly(node_id=node_id, metric=metric, value=value, z_score=z_score))

        anomalies.sort(key=lambda item: (-abs(item.z_score), item.node_id, item.metric))
        return anomalies


def detect(report: CentralityReport) -> list[GraphAnomaly]:
    return AnomalyDetector().detect(report)
