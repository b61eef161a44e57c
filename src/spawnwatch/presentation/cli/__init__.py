"""Console presentation for the tracker."""
