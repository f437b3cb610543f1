# Copyright 2023, Chariot Solutions
# 
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
# 
#     http://www.apache.org/licenses/LICENSE-2.0
# 
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


""" Code to resolve the EC2 identifiers used when wiring up a site-to-site VPN:
    the VPCs that a set of instances live in, the tagged public and private
    route tables of a VPC, and the configuration document for a customer gateway.

    Each function takes an optional EC2 client; if not provided, uses a default
    client for the current region and credentials.
    """

import boto3
import logging

from functools import lru_cache

from ..core import RouteTableIDs, RouteTableIDsNotFound, CustomerGatewayConfigNotFound

logger = logging.getLogger(__name__)

PUBLIC_ROUTE_TABLE_TAG = "PublicRouteTable"
PRIVATE_ROUTE_TABLE_TAG = "PrivateRouteTable"
CUSTOMER_GATEWAY_OUTPUT_PREFIX = "CustomerGateway"


def lookup_vpc_ids(instance_ids, ec2_client=None):
    """ Returns the unique IDs of the VPCs that contain the provided instances.
        Order of the result is not meaningful. An empty list of instances
        returns an empty list; EC2 would otherwise describe every instance.
        """
    if not instance_ids:
        return []
    ec2_client = ec2_client or _ec2_client()
    logger.debug("describing instances %s", instance_ids)
    resp = ec2_client.describe_instances(InstanceIds=list(instance_ids))
    vpc_ids = set()
    for reservation in resp.get('Reservations', []):
        for instance in reservation.get('Instances', []):
            vpc_id = instance.get('VpcId')
            if vpc_id:
                vpc_ids.add(vpc_id)
    return list(vpc_ids)


def lookup_route_table_ids(vpc_id, ec2_client=None):
    """ Returns the public and private route tables for a VPC, identified by
        tag values "PublicRouteTable" and "PrivateRouteTable". If more than one
        table carries the same tag, the last one returned by EC2 wins.
        """
    ec2_client = ec2_client or _ec2_client()
    logger.debug("describing route tables for %s", vpc_id)
    route_tables = ec2_client.describe_route_tables(Filters=_vpc_filter(vpc_id))['RouteTables']
    public_id = None
    private_id = None
    for rt in route_tables:
        for tag in rt.get('Tags', []):
            if tag.get('Value') == PUBLIC_ROUTE_TABLE_TAG:
                public_id = rt['RouteTableId']
            if tag.get('Value') == PRIVATE_ROUTE_TABLE_TAG:
                private_id = rt['RouteTableId']
    if public_id and private_id:
        return RouteTableIDs(public_id, private_id)
    raise RouteTableIDsNotFound(vpc_id)


def lookup_customer_gateway_config(customer_gateway_ip, stack, ec2_client=None):
    """ Given a CloudFormation stack description (as returned by describe_stacks),
        finds the VPN configuration for the customer gateway at the given IP.

        Each stack output whose key starts with "CustomerGateway" is taken to hold
        a customer gateway ID. The first VPN connection for that gateway is checked,
        and its configuration returned if it mentions the IP address. An empty IP
        address matches nothing.
        """
    if not customer_gateway_ip:
        raise CustomerGatewayConfigNotFound(customer_gateway_ip, stack.get('StackName'))
    ec2_client = ec2_client or _ec2_client()
    for output in stack.get('Outputs', []):
        if not output['OutputKey'].startswith(CUSTOMER_GATEWAY_OUTPUT_PREFIX):
            continue
        customer_gateway_id = output['OutputValue']
        logger.debug("describing VPN connections for %s", customer_gateway_id)
        vpn_connections = ec2_client.describe_vpn_connections(
                            Filters=_customer_gateway_filter(customer_gateway_id))['VpnConnections']
        if not vpn_connections:
            logger.debug("no VPN connections for %s", customer_gateway_id)
            continue
        # only the first connection is considered
        config = vpn_connections[0].get('CustomerGatewayConfiguration') or ""
        if customer_gateway_ip in config:
            return config
    raise CustomerGatewayConfigNotFound(customer_gateway_ip, stack.get('StackName'))


##
## Internals
##

@lru_cache(maxsize=1)
def _ec2_client():
    return boto3.client('ec2')


def _vpc_filter(vpc_id):
    return [{'Name': "vpc-id", 'Values': [vpc_id]}]


def _customer_gateway_filter(customer_gateway_id):
    return [{'Name': "customer-gateway-id", 'Values': [customer_gateway_id]}]
