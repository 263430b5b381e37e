from .sinks import DirectorySink, OutputSink, StreamSink

__all__ = ["DirectorySink", "OutputSink", "StreamSink"]
