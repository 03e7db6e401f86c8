"""UI components for the collage editor

- collage_canvas: Live preview of the document (QGraphicsView)
- layer_items: Scene items for image and text layers
- gestures: Pointer gesture interpreter for drag and pinch
- asset_picker_dialog: Library picker for app images and backgrounds
"""
