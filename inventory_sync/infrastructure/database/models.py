"""
Modelo de base de datos (ORM) de la tabla de inventario.
"""
from sqlalchemy import BigInteger, Column, Integer, String
from sqlalchemy.orm import declarative_base


# Base para modelos de SQLAlchemy
Base = declarative_base()

INVENTORY_TABLE_NAME = "Inventory"


class InventoryModel(Base):
    """
    Modelo de base de datos para items de inventario.
    
    Los nombres de columna conservan el esquema existente ("itemUUID",
    "updatedQty", ...) que leen los procesos externos (POS).
    Items nuevos dejan itemUUID y sku en NULL; LightSpeed los asigna
    cuando los datos se suben de vuelta.
    """
    
    __tablename__ = INVENTORY_TABLE_NAME
    
    # SQLite solo autoincrementa INTEGER PRIMARY KEY
    id = Column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True
    )
    item_uuid = Column("itemUUID", String(255), nullable=True, unique=True, default=None)
    item_name = Column("itemName", String(255), nullable=False)
    sku = Column("sku", String(255), nullable=True, unique=True, default=None)
    option_name = Column("optionName", String(255), nullable=False, default="")
    option_value = Column("optionValue", String(255), nullable=False, default="")
    discountable = Column("discountable", String(255), nullable=False, default="true")
    upc = Column("upc", String(255), nullable=False, default="")
    taxable = Column("taxable", String(255), nullable=False, default="true")
    department = Column("department", String(255), nullable=False, default="general")
    category = Column("category", String(255), nullable=False, default="general")
    supplier = Column("supplier", String(255), nullable=False, default="")
    supplier_code = Column("supplierCode", String(255), nullable=False, default="")
    price_type = Column("priceType", String(255), nullable=False, default="system")
    track_inventory = Column("trackInventory", String(255), nullable=False, default="true")
    register_status = Column("registerStatus", String(255), nullable=False, default="active")
    price = Column("price", String(255), nullable=False, default="0")  # moneda, sin calculos
    original_qty = Column("originalQty", String(255), nullable=False, default="")  # puede ser ""
    updated_qty = Column("updatedQty", Integer, nullable=False, default=0)
    cost = Column("cost", String(255), nullable=False, default="")
    
    def __repr__(self):
        return f"<Inventory(id={self.id}, sku={self.sku}, name={self.item_name})>"
