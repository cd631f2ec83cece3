"""
Reusable content blocks for hipdf

A Block is a named list of content stream instructions. Blocks can be drawn
inline (the instructions are copied into the page, wrapped in q/cm/Q) or
turned into Form XObjects once and then painted any number of times with
'Do', which keeps repeated content out of the page stream.

Usage:
    manager = BlockManager()
    manager.register(Block("marker", ops).with_bbox(0, 0, 20, 20))

    # Inline
    page_ops = manager.render_instances([BlockInstance.at("marker", 50, 50)])

    # As XObjects
    manager.create_xobjects(pdf)
    resources = pikepdf.Dictionary()
    page_ops = manager.render_instances_as_xobjects(instances, resources)
"""

from typing import Dict, Iterable, List, Optional, Tuple

import pikepdf

from .operations import Operation, encode_operations, name, op
from .transform import Transform
from .utilities import Print

DEFAULT_BBOX = (0.0, 0.0, 100.0, 100.0)


class Block:
    """
    A reusable block of PDF content.

    Attributes:
        id: Unique identifier used by BlockInstance
        operations: Instructions that make up the block
        bbox: Optional (x, y, width, height) for Form XObject creation
        resources: Optional resources dictionary the operations rely on
    """

    def __init__(self, id: str, operations: Optional[List[Operation]] = None):
        self.id = id
        self.operations: List[Operation] = list(operations or [])
        self.bbox: Optional[Tuple[float, float, float, float]] = None
        self.resources: Optional[pikepdf.Dictionary] = None

    def with_bbox(self, x: float, y: float, width: float, height: float) -> "Block":
        self.bbox = (x, y, width, height)
        return self

    def with_resources(self, resources: pikepdf.Dictionary) -> "Block":
        self.resources = resources
        return self

    def add_operation(self, operation: Operation) -> None:
        self.operations.append(operation)

    def add_operations(self, operations: Iterable[Operation]) -> None:
        self.operations.extend(operations)

    def __repr__(self) -> str:
        return f"Block(id={self.id!r}, operations={len(self.operations)}, bbox={self.bbox})"


class BlockInstance:
    """A placement of a registered block with a transform."""

    def __init__(self, block_id: str, transform: Optional[Transform] = None):
        self.block_id = block_id
        self.transform = transform or Transform()

    @classmethod
    def at(cls, block_id: str, x: float, y: float) -> "BlockInstance":
        return cls(block_id, Transform.translate(x, y))

    @classmethod
    def at_scaled(cls, block_id: str, x: float, y: float, scale: float) -> "BlockInstance":
        return cls(block_id, Transform.translate_scale(x, y, scale))

    def __repr__(self) -> str:
        return f"BlockInstance(block_id={self.block_id!r}, transform={self.transform})"


class BlockManager:
    """
    Registry of blocks and the Form XObjects created for them.

    Attributes:
        name_prefix: Prefix for XObject resource names (default 'Blk')
    """

    def __init__(self, config: Optional[dict] = None):
        """
        Args:
            config: Optional 'blocks' configuration section with keys:
                - default_bbox: [x1, y1, x2, y2] used when a block has no bbox
                - name_prefix: str - XObject resource name prefix
        """
        config = config or {}
        self.default_bbox = tuple(config.get('default_bbox', DEFAULT_BBOX))
        self.name_prefix = config.get('name_prefix', 'Blk')

        self._blocks: Dict[str, Block] = {}
        self._xobjects: Dict[str, pikepdf.Object] = {}
        self._xobject_counter = 0

    def register(self, block: Block) -> None:
        self._blocks[block.id] = block

    def register_blocks(self, blocks: Iterable[Block]) -> None:
        for block in blocks:
            self.register(block)

    def get(self, id: str) -> Optional[Block]:
        return self._blocks.get(id)

    def remove(self, id: str) -> Optional[Block]:
        """Remove a block and forget its XObject, if one was created."""
        self._xobjects.pop(id, None)
        return self._blocks.pop(id, None)

    def has(self, id: str) -> bool:
        return id in self._blocks

    def count(self) -> int:
        return len(self._blocks)

    def __len__(self) -> int:
        return len(self._blocks)

    def __contains__(self, id: str) -> bool:
        return id in self._blocks

    def render_instance(self, instance: BlockInstance) -> List[Operation]:
        """
        Render a block instance inline.

        Returns:
            q, cm, <block operations>, Q; or an empty list when the block
            is not registered
        """
        block = self._blocks.get(instance.block_id)
        if block is None:
            Print("DEBUG", f"Unknown block '{instance.block_id}', skipping instance")
            return []

        return [
            op('q'),
            instance.transform.to_operation(),
            *block.operations,
            op('Q'),
        ]

    def render_instances(self, instances: Iterable[BlockInstance]) -> List[Operation]:
        operations = []
        for instance in instances:
            operations.extend(self.render_instance(instance))
        return operations

    def create_xobjects(self, pdf: pikepdf.Pdf) -> None:
        """
        Create a Form XObject in the document for every registered block
        that does not have one yet.
        """
        created = 0
        for id, block in self._blocks.items():
            if id not in self._xobjects:
                self._xobjects[id] = self._create_xobject_for_block(pdf, block)
                created += 1
        Print("DEBUG", f"Created {created} block XObject{'s' if created != 1 else ''}")

    def xobject(self, id: str) -> Optional[pikepdf.Object]:
        """The Form XObject created for a block, if any."""
        return self._xobjects.get(id)

    def _create_xobject_for_block(self, pdf: pikepdf.Pdf, block: Block) -> pikepdf.Object:
        if block.bbox is not None:
            x, y, w, h = block.bbox
            bbox = [x, y, x + w, y + h]
        else:
            bbox = list(self.default_bbox)

        stream = pikepdf.Stream(pdf, encode_operations(block.operations))
        stream.stream_dict[pikepdf.Name.Type] = pikepdf.Name.XObject
        stream.stream_dict[pikepdf.Name.Subtype] = pikepdf.Name.Form
        stream.stream_dict[pikepdf.Name.BBox] = pikepdf.Array(bbox)
        if block.resources is not None:
            stream.stream_dict[pikepdf.Name.Resources] = block.resources

        return pdf.make_indirect(stream)

    def render_instances_as_xobjects(
        self,
        instances: Iterable[BlockInstance],
        resources: pikepdf.Dictionary
    ) -> List[Operation]:
        """
        Render instances by painting their blocks' Form XObjects.

        Every painted instance gets a fresh resource name (Blk0, Blk1, ...)
        which is added to the /XObject entry of `resources`. Instances whose
        block has no XObject (create_xobjects() not called, or unknown id)
        are skipped.

        Args:
            instances: Block instances to paint
            resources: Page or form resources dictionary to register names in

        Returns:
            q, cm, Do, Q for each painted instance
        """
        operations = []
        xobject_dict = None

        for instance in instances:
            xobject = self._xobjects.get(instance.block_id)
            if xobject is None:
                Print("DEBUG", f"No XObject for block '{instance.block_id}', skipping instance")
                continue

            if xobject_dict is None:
                if '/XObject' not in resources:
                    resources.XObject = pikepdf.Dictionary()
                xobject_dict = resources.XObject

            resource_name = f"{self.name_prefix}{self._xobject_counter}"
            self._xobject_counter += 1
            xobject_dict[name(resource_name)] = xobject

            operations.extend([
                op('q'),
                instance.transform.to_operation(),
                op('Do', name(resource_name)),
                op('Q'),
            ])

        return operations

    def clear(self) -> None:
        """Forget all blocks and XObjects and reset resource naming."""
        self._blocks.clear()
        self._xobjects.clear()
        self._xobject_counter = 0


def merge_blocks(blocks: Iterable[Block]) -> List[Operation]:
    """Concatenate the operations of several blocks, in order."""
    operations = []
    for block in blocks:
        operations.extend(block.operations)
    return operations
