#!/usr/bin/env python3
"""
Functional Test for Optional Content Groups (layers)

Verifies:
1. Layer bookkeeping (indices, lookups, duplicate names)
2. OCG and /OCProperties creation, including ON/OFF lists and config
3. Page resource tags and the catalog entry
4. Marked content built with LayerContentBuilder
5. A saved document that reopens with its layers intact

Usage:
    python tests/functional_tests/layers_test.py
"""

import tempfile
from pathlib import Path

import pikepdf
import pytest

from hipdf.layers import MIN_PDF_VERSION, Layer, LayerContentBuilder, LayerOperations, OCGConfig, OCGManager
from hipdf.operations import append_content, operator_names, resource_dictionary
from hipdf.utilities import Print

from sample_pdfs import run_tests, target_pdf


def test_layer_bookkeeping():
    Print("HEADER", "Layer bookkeeping")
    manager = OCGManager()
    assert manager.is_empty()

    assert manager.add_layer(Layer("Background")) == 0
    assert manager.add_layer(Layer("Notes").with_visibility(False)) == 1
    assert manager.add_layer(Layer("Background", default_visible=False)) == 2

    assert len(manager) == 3
    assert not manager.is_empty()
    assert manager.get_layer("Notes").default_visible is False
    # last layer with a name wins
    assert manager.get_layer("Background") is manager.layers[2]
    assert manager.get_layer("Missing") is None


def test_initialize_creates_ocgs_and_properties():
    Print("HEADER", "OCG creation")
    pdf = target_pdf()
    manager = OCGManager()
    manager.add_layer(Layer("Visible"))
    manager.add_layer(Layer("Hidden", default_visible=False))

    assert not manager.has_oc_properties()
    manager.initialize(pdf)
    assert manager.has_oc_properties()

    visible, hidden = manager.layers
    assert visible.ocg.is_indirect
    assert visible.ocg.Type == pikepdf.Name.OCG
    assert str(hidden.ocg.Name) == "Hidden"

    properties = manager.oc_properties
    assert len(properties.OCGs) == 2
    default = properties.D
    assert default.BaseState == pikepdf.Name.ON
    assert default.ListMode == pikepdf.Name.AllPages
    assert [ocg.objgen for ocg in default.ON] == [visible.ocg.objgen]
    assert [ocg.objgen for ocg in default.OFF] == [hidden.ocg.objgen]
    assert [ocg.objgen for ocg in default.Order] == [visible.ocg.objgen, hidden.ocg.objgen]
    assert list(properties.Intent) == [pikepdf.Name.View]


def test_config_controls_optional_entries():
    pdf = target_pdf()
    config = OCGConfig.from_dict({"base_state": "", "create_panel_ui": False, "intent": []})
    manager = OCGManager(config)
    manager.add_layer(Layer("Only"))
    manager.initialize(pdf)

    default = manager.oc_properties.D
    assert '/BaseState' not in default
    assert '/ListMode' not in default
    assert '/OFF' not in default
    assert '/Intent' not in manager.oc_properties


def test_page_resources_require_initialize():
    manager = OCGManager()
    manager.add_layer(Layer("A"))
    with pytest.raises(RuntimeError):
        manager.setup_page_resources(pikepdf.Dictionary())


def test_page_resources_and_catalog():
    Print("HEADER", "Page resources and catalog")
    pdf = target_pdf()
    manager = OCGManager()
    manager.add_layer(Layer("A"))
    manager.add_layer(Layer("B"))
    manager.initialize(pdf)

    resources = pikepdf.Dictionary()
    layer_map = manager.setup_page_resources(resources)
    assert layer_map == {"A": "L0", "B": "L1"}
    assert manager.get_layer("B").tag == "L1"
    assert resources.Properties.L0.objgen == manager.layers[0].ocg.objgen

    manager.update_catalog(pdf)
    assert pdf.Root.OCProperties.objgen == manager.oc_properties.objgen


def test_content_builder():
    Print("HEADER", "Marked content")
    builder = LayerContentBuilder()
    builder.begin_layer("L0").add_operation(LayerOperations.rectangle(0, 0, 10, 10))
    builder.begin_layer("L1").add_operations([LayerOperations.fill(), LayerOperations.stroke()])
    ops = builder.build()

    assert operator_names(ops) == ['BDC', 're', 'EMC', 'BDC', 'f', 'S', 'EMC']
    assert ops[0].operands[0] == pikepdf.Name.OC
    assert ops[0].operands[1] == pikepdf.Name('/L0')
    assert builder.current_layer is None


def test_content_builder_context_manager():
    builder = LayerContentBuilder()
    with builder.layer("L2") as content:
        content.add_operation(LayerOperations.set_fill_color_gray(0.5))
    builder.end_layer()
    builder.add_operation(LayerOperations.fill())

    assert operator_names(builder.build()) == ['BDC', 'g', 'EMC', 'f']


def test_layer_operations():
    ops = [
        LayerOperations.set_fill_color_rgb(1, 0, 0),
        LayerOperations.set_stroke_color_rgb(0, 1, 0),
        LayerOperations.begin_text(),
        LayerOperations.set_font("F1", 12),
        LayerOperations.text_position(72, 720),
        LayerOperations.show_text("Layered"),
        LayerOperations.end_text(),
    ]
    assert operator_names(ops) == ['rg', 'RG', 'BT', 'Tf', 'Td', 'Tj', 'ET']
    assert ops[3].operands[0] == pikepdf.Name('/F1')
    assert str(ops[5].operands[0]) == "Layered"


def test_layered_document_round_trip():
    Print("HEADER", "Saved layered document")
    with tempfile.TemporaryDirectory() as tmp:
        output = Path(tmp) / "layers.pdf"

        pdf = target_pdf()
        manager = OCGManager()
        manager.add_layer(Layer("Grid"))
        manager.add_layer(Layer("Annotations", default_visible=False))
        manager.initialize(pdf)

        page = pdf.pages[0]
        resource_dictionary(page, 'Properties')
        layer_map = manager.setup_page_resources(page.obj.Resources)
        manager.update_catalog(pdf)

        builder = LayerContentBuilder()
        with builder.layer(layer_map["Grid"]):
            builder.add_operations([LayerOperations.rectangle(10, 10, 100, 100), LayerOperations.stroke()])
        with builder.layer(layer_map["Annotations"]):
            builder.add_operations([LayerOperations.rectangle(20, 20, 50, 50), LayerOperations.fill()])
        append_content(pdf, page, builder.build())

        pdf.save(output, min_version=MIN_PDF_VERSION)

        with pikepdf.open(output) as reopened:
            assert reopened.pdf_version >= MIN_PDF_VERSION
            names = [str(ocg.Name) for ocg in reopened.Root.OCProperties.OCGs]
            assert names == ["Grid", "Annotations"]
            ops = operator_names(pikepdf.parse_content_stream(reopened.pages[0]))
            assert ops.count('BDC') == 2
            assert ops.count('EMC') == 2


def main():
    run_tests("Layers Functional Test", [
        test_layer_bookkeeping,
        test_initialize_creates_ocgs_and_properties,
        test_config_controls_optional_entries,
        test_page_resources_require_initialize,
        test_page_resources_and_catalog,
        test_content_builder,
        test_content_builder_context_manager,
        test_layer_operations,
        test_layered_document_round_trip,
    ])


if __name__ == "__main__":
    main()
