from htsbonsai.model.mean_vari import MeanVari
from htsbonsai.model.parameters import Model, ModelParameter
from htsbonsai.model.question import Question
from htsbonsai.model.tree import Tree, TreeLeaf, TreeNode
from htsbonsai.model.voice import (
    GlobalModelMetadata,
    StreamModelMetadata,
    StreamModels,
    Voice,
)
from htsbonsai.model.window import Window, Windows


def make_metadata(**overrides):
    values = dict(
        hts_voice_version="1.0",
        sampling_frequency=48000,
        frame_period=240,
        num_states=5,
        num_streams=3,
        stream_type=["MCP", "LF0", "LPF"],
        fullcontext_format="HTS_TTS_JPN",
        fullcontext_version="1.0",
        gv_off_context=Question.parse(["*-sil+*", "*-pau+*"]),
    )
    values.update(overrides)
    return GlobalModelMetadata(**values)


def make_model():
    question = Question.parse(["*-a+*"])
    return Model(
        trees=[Tree(2, [TreeNode(question, yes=1, no=2), TreeLeaf(1), TreeLeaf(2)])],
        pdf=[[ModelParameter([MeanVari(1.0, 2.0)]), ModelParameter([MeanVari(3.0, 4.0)])]],
    )


def test_global_metadata_str():
    assert str(make_metadata()) == (
        "HTS Voice Version: 1.0\n"
        "Sampling Frequency: 48000\n"
        "Frame Period: 240\n"
        "Number of States: 5\n"
        "Number of Streams: 3\n"
        "Streams: MCP, LF0, LPF\n"
        "Fullcontext: HTS_TTS_JPN@1.0\n"
    )


def test_global_metadata_equality_depends_on_question():
    assert make_metadata() == make_metadata()
    other = make_metadata(gv_off_context=Question.parse(["*-sil+*"]))
    assert make_metadata() != other


def test_stream_models_str_without_gv():
    model = make_model()
    stream = StreamModels(
        StreamModelMetadata(31, 1, False, False, []),
        model,
        None,
        Windows([Window([1.0])]),
    )
    assert str(stream) == f"  Model: {model}  Window Width: 1\n"
    assert "GV Model" not in str(stream)


def test_stream_models_str_with_gv():
    model = make_model()
    stream = StreamModels(
        StreamModelMetadata(1, 3, True, True, []),
        model,
        model,
        Windows([Window([1.0]), Window([-0.5, 0.0, 0.5]), Window([1.0, -2.0, 1.0])]),
    )
    text = str(stream)
    assert text == f"  Model: {model}  GV Model: {model}  Window Width: 1, 3, 3\n"


def test_model_str_layout_in_voice():
    model = make_model()
    assert str(model) == "\n    #2: 3 -> 2\n"


def test_voice_str():
    model = make_model()
    stream = StreamModels(
        StreamModelMetadata(1, 1, False, False, []),
        model,
        None,
        Windows([Window([1.0])]),
    )
    voice = Voice(make_metadata(), model, [stream, stream])
    assert str(voice) == (
        f"Duration Model: {model}Stream Models:\n#0:\n{stream}#1:\n{stream}"
    )


def test_stream_metadata_equality():
    a = StreamModelMetadata(35, 3, False, True, ["ALPHA=0.55"])
    b = StreamModelMetadata(35, 3, False, True, ["ALPHA=0.55"])
    c = StreamModelMetadata(35, 3, False, False, ["ALPHA=0.55"])
    assert a == b
    assert a != c